# topmark:header:start
#
#   project      : ReqPipe
#   file         : contracts.py
#   file_relpath : src/reqpipe/pipeline/contracts.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type contracts for pipeline steps (engine-facing).

Steps are *callables*. The engine invokes request steps as ``step(request)``
and response/error steps as ``step(request, response_or_failure)``; the
callable types are [`RequestStepFn`][reqpipe.pipeline.models.RequestStepFn] and
[`ExchangeStepFn`][reqpipe.pipeline.models.ExchangeStepFn]. Plain functions
qualify; class-based steps usually subclass
[`RequestStep`][reqpipe.pipeline.steps.base.RequestStep] or
[`ExchangeStep`][reqpipe.pipeline.steps.base.ExchangeStep].

Return shapes
-------------
Request steps return one of:

- the (updated) ``PipelineRequest`` to continue;
- ``(request, Response)`` to skip dispatch and enter the response phase;
- ``(request, PipelineError)`` to skip dispatch and enter the error phase;
- ``(request.halt(), Response | PipelineError)`` to finish the call.

A request returned on its own must not be halted: halting always carries the
final value, so a bare halted request raises
[`StepContractError`][reqpipe.errors.StepContractError]. Use
``(request.halt(), value)`` to stop early.

Response and error steps return ``(request, Response | PipelineError)``,
optionally with the request halted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest, Response

Exchange = tuple["PipelineRequest", Union["Response", Exception]]
