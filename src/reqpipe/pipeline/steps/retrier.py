# topmark:header:start
#
#   project      : ReqPipe
#   file         : retrier.py
#   file_relpath : src/reqpipe/pipeline/steps/retrier.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Retry step.

The same instance is registered as a response step *and* an error step. It
retries a request that resulted in:

- a response with status 5xx, or
- a non-fatal failure (transport or codec errors).

Responses below 500 and fatal failures pass through unchanged. While
``request.private.retry_attempt < max_attempts``, the step logs its decision,
sleeps ``delay`` milliseconds, bumps the counter and re-runs the pipeline on a
reborn request; the original request is returned halted with the nested
result. The counter is shared across the whole call, so a call performs at
most ``max_attempts + 1`` dispatches.

Example log output (defaults):

    [ERROR] RetryStep: Got response with status 500. Will retry in 2000ms, 2 attempts left
    [ERROR] RetryStep: Got response with status 500. Will retry in 2000ms, 1 attempt left
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from reqpipe.config.logging import get_logger
from reqpipe.config.options import RetryOptions
from reqpipe.constants import RETRY_STATUS_THRESHOLD
from reqpipe.pipeline import engine
from reqpipe.pipeline.models import Response
from reqpipe.pipeline.steps.base import ExchangeStep

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest, Result

logger: ReqpipeLogger = get_logger(__name__)


class RetryStep(ExchangeStep):
    """Retry 5xx responses and non-fatal failures.

    Args:
        options (RetryOptions | None): Delay and attempt settings (defaults if None).
        sleep (Callable[[float], None]): Blocking sleep taking seconds.
    """

    def __init__(
        self,
        options: RetryOptions | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(name=self.__class__.__name__)
        self.options: RetryOptions = options or RetryOptions()
        self.sleep: Callable[[float], None] = sleep

    def may_proceed(self, request: PipelineRequest, outcome: Response | Exception) -> bool:
        """Retry 5xx responses and failures that are not fatal."""
        if isinstance(outcome, Response):
            return outcome.status >= RETRY_STATUS_THRESHOLD
        return not getattr(outcome, "fatal", False)

    def run(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Re-run the pipeline, or pass through once attempts are exhausted."""
        attempt: int = request.private.retry_attempt
        if attempt >= self.options.max_attempts:
            logger.debug("%s: giving up after %d attempt(s)", self.name, attempt)
            return request, outcome

        self._log_retry(outcome, attempt)
        self.sleep(self.options.delay / 1000)
        request.private.retry_attempt = attempt + 1

        result: Result = engine.run(request.reborn())
        return request.halt(), result.value

    def _log_retry(self, outcome: Response | Exception, attempt: int) -> None:
        left: int = self.options.max_attempts - attempt
        attempts_left: str = "1 attempt" if left == 1 else f"{left} attempts"
        message: str = f"Will retry in {self.options.delay}ms, {attempts_left} left"

        if isinstance(outcome, Response):
            logger.error("%s: Got response with status %d. %s", self.name, outcome.status, message)
        else:
            logger.error("%s: Got exception. %s", self.name, message)
            logger.error("** (%s) %s", outcome.__class__.__name__, outcome)
