# topmark:header:start
#
#   project      : ReqPipe
#   file         : pipelines.py
#   file_relpath : src/reqpipe/pipeline/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Default pipeline assembly for ReqPipe.

Overview
--------
- request: normalize headers → default headers → encode → [auth] → [params]
- response: [retry] → follow redirects → decompress → decode
- error: [retry]

Mermaid (orientation)
---------------------
```mermaid
flowchart LR
  subgraph Request
    N[normalizer] --> D[defaults] --> E[encoder] --> A[authenticator?] --> P[params?]
  end
  P --> X((transport))
  subgraph Response
    R1[retrier?] --> F[redirector] --> Z[decompressor] --> C[decoder]
  end
  subgraph Error
    R2[retrier?]
  end
  X -->|response| R1
  X -->|failure| R2
```

Notes:
* Bracketed steps follow the *maybe* rule: they are added only if their
  option is set and not `False`.
* The retry step is a single instance shared by the response and error lists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from reqpipe.config.logging import get_logger
from reqpipe.pipeline.request import add_error_steps, add_request_steps, add_response_steps
from reqpipe.pipeline.steps import (
    authenticator,
    decoder,
    decompressor,
    defaults,
    encoder,
    normalizer,
    params,
    redirector,
    retrier,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.config.options import PipelineOptions
    from reqpipe.pipeline.models import ExchangeStepFn, PipelineRequest, RequestStepFn

logger: ReqpipeLogger = get_logger(__name__)

_S = TypeVar("_S")


def maybe_step(option: Any, factory: Callable[[], _S]) -> list[_S]:
    """Return ``[factory()]`` unless ``option`` is None or False."""
    if option is None or option is False:
        return []
    return [factory()]


def default_request_steps(options: PipelineOptions) -> list[RequestStepFn]:
    """Return the default request steps for ``options``, in execution order."""
    steps: list[RequestStepFn] = [
        normalizer.NormalizeHeadersStep(),  # Symbolic header names to strings
        defaults.DefaultHeadersStep(user_agent=options.user_agent),  # user-agent, accept-encoding
        encoder.EncodeStep(),  # Form / Json bodies
    ]
    if options.auth is not None:
        steps.append(authenticator.AuthStep(*options.auth))
    if options.params is not None:
        steps.append(params.ParamsStep(options.params))
    return steps


def add_default_steps(request: PipelineRequest, options: PipelineOptions) -> PipelineRequest:
    """Attach the default request, response and error steps.

    Args:
        request (PipelineRequest): The request to extend.
        options (PipelineOptions): Options selecting the optional steps.

    Returns:
        PipelineRequest: The same request, for chaining.
    """
    retry_steps: list[ExchangeStepFn] = maybe_step(
        options.retry, lambda: retrier.RetryStep(options.retry)
    )
    response_steps: list[ExchangeStepFn] = retry_steps + [
        redirector.FollowRedirectsStep(max_redirects=options.max_redirects),
        decompressor.DecompressStep(),
        decoder.DecodeStep(csv_decoder=decoder.parse_csv if options.decode_csv else None),
    ]

    request_steps: list[RequestStepFn] = default_request_steps(options)
    logger.debug(
        "Default pipeline: request=%s response=%s error=%s",
        [getattr(s, "name", s) for s in request_steps],
        [getattr(s, "name", s) for s in response_steps],
        [getattr(s, "name", s) for s in retry_steps],
    )

    add_request_steps(request, request_steps)
    add_response_steps(request, response_steps)
    add_error_steps(request, list(retry_steps))
    return request
