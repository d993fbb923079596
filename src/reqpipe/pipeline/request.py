# topmark:header:start
#
#   project      : ReqPipe
#   file         : request.py
#   file_relpath : src/reqpipe/pipeline/request.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pipeline request construction and step attachment.

`build()` allocates a bare `PipelineRequest`: no steps are attached, so callers
can assemble a fully custom pipeline. Steps are added with the three
``add_*_steps`` helpers, which only ever append.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from reqpipe.config.logging import get_logger
from reqpipe.errors import MalformedTargetError
from reqpipe.pipeline.models import Body, HttpMethod, PipelineRequest
from reqpipe.transport import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.models import ExchangeStepFn, RequestStepFn
    from reqpipe.transport import Transport

logger: ReqpipeLogger = get_logger(__name__)

_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def parse_target(target: str | httpx.URL) -> httpx.URL:
    """Parse ``target`` into an absolute http(s) URL.

    Raises:
        MalformedTargetError: If the URL cannot be parsed, or lacks an
            http/https scheme or a host.
    """
    try:
        url: httpx.URL = target if isinstance(target, httpx.URL) else httpx.URL(target)
    except (httpx.InvalidURL, TypeError) as exc:
        raise MalformedTargetError(f"cannot parse target {target!r}: {exc}") from exc
    if url.scheme not in _SCHEMES or not url.host:
        raise MalformedTargetError(f"target must be an absolute http(s) URL: {target!r}")
    return url


def build(
    method: HttpMethod | str,
    target: str | httpx.URL,
    *,
    headers: Iterable[tuple[Any, str]] | None = None,
    body: Body = b"",
    transport: Transport | None = None,
) -> PipelineRequest:
    """Build a request pipeline with no steps attached.

    Args:
        method (HttpMethod | str): The HTTP verb (case-insensitive).
        target (str | httpx.URL): The absolute target URL.
        headers (Iterable[tuple[Any, str]] | None): Initial header pairs.
        body (Body): Raw payload, or a `Form` / `Json` shape.
        transport (Transport | None): Transport adapter; defaults to a new
            `HttpxTransport`.

    Returns:
        PipelineRequest: The new request.

    Raises:
        MalformedTargetError: If ``target`` is not an absolute http(s) URL.
        ValueError: If ``method`` is not a known HTTP verb.
    """
    if transport is None:
        transport = HttpxTransport()

    request: PipelineRequest = PipelineRequest(
        method=HttpMethod.parse(method),
        url=parse_target(target),
        transport=transport,
        headers=list(headers or []),
        body=body,
    )
    logger.debug(
        "Built %s %s (%d header(s))", request.method.value, request.url, len(request.headers)
    )
    return request


def add_request_steps(request: PipelineRequest, steps: Iterable[RequestStepFn]) -> PipelineRequest:
    """Append request steps, preserving prior order."""
    request.request_steps.extend(steps)
    return request


def add_response_steps(
    request: PipelineRequest, steps: Iterable[ExchangeStepFn]
) -> PipelineRequest:
    """Append response steps, preserving prior order."""
    request.response_steps.extend(steps)
    return request


def add_error_steps(request: PipelineRequest, steps: Iterable[ExchangeStepFn]) -> PipelineRequest:
    """Append error steps, preserving prior order."""
    request.error_steps.extend(steps)
    return request
