# topmark:header:start
#
#   project      : ReqPipe
#   file         : base.py
#   file_relpath : src/reqpipe/pipeline/steps/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Base classes for class-based pipeline steps.

The engine invokes steps as *callables*. The bases implement the common
lifecycle:

    request = step(request)                   # RequestStep: may_proceed → run?
    request, outcome = step(request, outcome) # ExchangeStep: may_proceed → run?

A step that may not proceed returns its input unchanged, so gating never
alters the shape seen by the executor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from reqpipe.config.logging import get_logger
from reqpipe.pipeline.models import Response

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest

logger: ReqpipeLogger = get_logger(__name__)


@dataclass
class RequestStep:
    """Reusable foundation for request-phase steps.

    Subclass this and override ``run()`` (and ``may_proceed()`` when the step
    is conditional). Do not override ``__call__``.

    Attributes:
        name (str): Stable step identifier for logs.
    """

    name: str

    def __call__(self, request: PipelineRequest) -> PipelineRequest | Exchange:
        """Invoke the step lifecycle: gate → run (if allowed).

        Args:
            request (PipelineRequest): The request being prepared.

        Returns:
            PipelineRequest | Exchange: The updated request, or a short-circuit pair.
        """
        if not self.may_proceed(request):
            logger.trace("%s: may not proceed", self.name)
            return request
        logger.trace("%s: running", self.name)
        return self.run(request)

    def may_proceed(self, request: PipelineRequest) -> bool:
        """Return whether the step should run. Default: ``True``."""
        return True

    def run(self, request: PipelineRequest) -> PipelineRequest | Exchange:
        """Perform the step's work. Default: return ``request`` unchanged."""
        return request


@dataclass
class ExchangeStep:
    """Reusable foundation for response-phase and error-phase steps.

    By default a step only proceeds on a `Response`; failures pass through
    untouched. Steps registered in the error phase override ``may_proceed()``.

    Attributes:
        name (str): Stable step identifier for logs.
    """

    name: str

    def __call__(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Invoke the step lifecycle: gate → run (if allowed).

        Args:
            request (PipelineRequest): The request that produced ``outcome``.
            outcome (Response | Exception): The in-flight response or failure.

        Returns:
            Exchange: ``(request, response_or_failure)``, possibly halted.
        """
        if not self.may_proceed(request, outcome):
            logger.trace("%s: may not proceed", self.name)
            return request, outcome
        logger.trace("%s: running", self.name)
        return self.run(request, outcome)

    def may_proceed(self, request: PipelineRequest, outcome: Response | Exception) -> bool:
        """Return whether the step should run. Default: only on responses."""
        return isinstance(outcome, Response)

    def run(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Perform the step's work. Default: pass the pair through."""
        return request, outcome
