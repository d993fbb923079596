# topmark:header:start
#
#   project      : ReqPipe
#   file         : engine.py
#   file_relpath : src/reqpipe/pipeline/engine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Chain executor for ReqPipe pipelines (engine layer).

The executor runs the three step lists of a
[`PipelineRequest`][reqpipe.pipeline.models.PipelineRequest] around a single
transport dispatch. It is modelled as one state machine:

```mermaid
stateDiagram-v2
  [*] --> REQUEST
  REQUEST --> DISPATCH: all request steps continued
  REQUEST --> RESPONSE: step returned (request, response)
  REQUEST --> ERROR: step returned (request, failure)
  DISPATCH --> RESPONSE: transport returned a response
  DISPATCH --> ERROR: transport raised TransportError
  RESPONSE --> ERROR: step returned (request, failure)
  ERROR --> DONE: step returned (request, response)
  REQUEST --> DONE: halted
  RESPONSE --> DONE: halted / all steps ran
  ERROR --> DONE: halted / all steps ran
```

Each step's return value is classified into a `Shape`; the pair
``(phase, shape)`` is looked up in `TRANSITIONS` to find the next phase. A
pair missing from the table is a step-contract violation and raises
`StepContractError`.

Retry and redirect steps re-enter the executor by calling `run()` on a reborn
request; the nested result becomes the halted value of the outer chain.

Design goals:
  - No CLI dependencies: presentation belongs to ``reqpipe.cli``.
  - Failures are values: the executor never swallows a failure; it either
    feeds it to the error phase or returns it in the `Result`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Final

from reqpipe.config.logging import get_logger
from reqpipe.errors import PipelineError, StepContractError
from reqpipe.pipeline.models import (
    Form,
    Json,
    PipelineRequest,
    Response,
    Result,
    normalize_header_name,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reqpipe.config.logging import ReqpipeLogger

logger: ReqpipeLogger = get_logger(__name__)

__all__: list[str] = [
    "Phase",
    "Shape",
    "TRANSITIONS",
    "run",
    "run_or_raise",
]


class Phase(Enum):
    """Executor states."""

    REQUEST = "request"
    DISPATCH = "dispatch"
    RESPONSE = "response"
    ERROR = "error"
    DONE = "done"


class Shape(Enum):
    """Classification of a step's return value."""

    REQUEST = "request"  # bare, non-halted request
    HALTED = "halted"  # (halted request, response or failure)
    RESPONSE = "response"  # (request, response)
    FAILURE = "failure"  # (request, failure)


TRANSITIONS: Final[dict[tuple[Phase, Shape], Phase]] = {
    (Phase.REQUEST, Shape.REQUEST): Phase.REQUEST,
    (Phase.REQUEST, Shape.HALTED): Phase.DONE,
    (Phase.REQUEST, Shape.RESPONSE): Phase.RESPONSE,
    (Phase.REQUEST, Shape.FAILURE): Phase.ERROR,
    (Phase.RESPONSE, Shape.HALTED): Phase.DONE,
    (Phase.RESPONSE, Shape.RESPONSE): Phase.RESPONSE,
    (Phase.RESPONSE, Shape.FAILURE): Phase.ERROR,
    (Phase.ERROR, Shape.HALTED): Phase.DONE,
    (Phase.ERROR, Shape.FAILURE): Phase.ERROR,
    # A response produced by an error step is final: response steps are not re-run.
    (Phase.ERROR, Shape.RESPONSE): Phase.DONE,
}


def _step_name(step: Any) -> str:
    return getattr(step, "name", None) or getattr(step, "__name__", None) or repr(step)


def _steps_for(request: PipelineRequest, phase: Phase) -> Sequence[Any]:
    if phase is Phase.REQUEST:
        return request.request_steps
    if phase is Phase.RESPONSE:
        return request.response_steps
    return request.error_steps


def _classify(
    step: Any,
    phase: Phase,
    returned: Any,
) -> tuple[PipelineRequest, Response | Exception | None, Shape]:
    """Return ``(request, outcome, shape)`` for a step's return value.

    Raises:
        StepContractError: If ``returned`` matches no expected shape.
    """
    if isinstance(returned, PipelineRequest):
        if not returned.halted:
            return returned, None, Shape.REQUEST
        raise StepContractError(
            f"{phase.value} step {_step_name(step)} halted the request without a value; "
            "return (request.halt(), response_or_failure)"
        )
    if isinstance(returned, tuple) and len(returned) == 2:
        request, value = returned
        if isinstance(request, PipelineRequest) and isinstance(value, (Response, Exception)):
            if request.halted:
                return request, value, Shape.HALTED
            if isinstance(value, Response):
                return request, value, Shape.RESPONSE
            return request, value, Shape.FAILURE

    raise StepContractError(
        f"{phase.value} step {_step_name(step)} returned an unexpected value: {returned!r}"
    )


def _dispatch(request: PipelineRequest) -> Response | PipelineError:
    """Invoke the transport once; a transport failure is returned, not raised."""
    if isinstance(request.body, (Form, Json)):
        raise StepContractError(
            f"body {request.body.__class__.__name__} reached dispatch unencoded; "
            "add an encode step"
        )
    headers: list[tuple[str, str]] = [
        (normalize_header_name(name), value) for name, value in request.headers
    ]
    try:
        return request.transport.send(request.method.value, request.url, headers, request.body)
    except PipelineError as exc:
        return exc


def run(request: PipelineRequest) -> Result:
    """Run a request pipeline.

    Args:
        request (PipelineRequest): The request with its step lists attached.

    Returns:
        Result: ``Result.success(response)`` or ``Result.failure(error)``.

    Raises:
        StepContractError: If a step returns a value of an unexpected shape.
    """
    request.snapshot()

    phase: Phase = Phase.REQUEST
    outcome: Response | Exception | None = None
    cursor: int = 0

    while phase is not Phase.DONE:
        if phase is Phase.DISPATCH:
            outcome = _dispatch(request)
            phase = Phase.RESPONSE if isinstance(outcome, Response) else Phase.ERROR
            logger.trace("dispatch -> %s", phase.value)
            cursor = 0
            continue

        steps: Sequence[Any] = _steps_for(request, phase)
        if cursor >= len(steps):
            phase = Phase.DISPATCH if phase is Phase.REQUEST else Phase.DONE
            logger.trace("steps exhausted -> %s", phase.value)
            continue

        step: Any = steps[cursor]
        cursor += 1
        returned: Any = step(request) if phase is Phase.REQUEST else step(request, outcome)

        shape: Shape
        request, value, shape = _classify(step, phase, returned)
        if shape is not Shape.REQUEST:
            outcome = value

        next_phase: Phase | None = TRANSITIONS.get((phase, shape))
        if next_phase is None:
            raise StepContractError(
                f"{phase.value} step {_step_name(step)} produced a {shape.value} outcome "
                "that is not allowed in this phase"
            )
        if next_phase is not phase:
            logger.trace(
                "%s step %s: %s -> %s", phase.value, _step_name(step), shape.value, next_phase.value
            )
            cursor = 0
        phase = next_phase

    if isinstance(outcome, Response):
        logger.debug("%s %s -> %d", request.method.value, request.url, outcome.status)
        return Result.success(outcome)
    assert isinstance(outcome, Exception)
    logger.debug("%s %s -> %r", request.method.value, request.url, outcome)
    return Result.failure(outcome)


def run_or_raise(request: PipelineRequest) -> Response:
    """Run a request pipeline and return the response or raise the failure.

    See `run` for details.
    """
    return run(request).unwrap()
