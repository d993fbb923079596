# topmark:header:start
#
#   project      : ReqPipe
#   file         : redirector.py
#   file_relpath : src/reqpipe/pipeline/steps/redirector.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Redirect-follow step.

On a 301/302 response the step reads ``location`` and resubmits the request:

- a location starting with ``/`` replaces the path and query of the current
  URL (scheme, host and port are kept);
- any other location replaces the URL wholesale.

The resubmission is an ordinary call to [`engine.run`][reqpipe.pipeline.engine.run]
on a reborn request. The original request is returned halted, paired with the
nested result, so no sibling step of the current chain runs afterwards.

The number of redirects followed within one call is tracked in
``request.private.redirect_count`` and capped by ``max_redirects``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from reqpipe.config.logging import get_logger
from reqpipe.constants import DEFAULT_MAX_REDIRECTS, REDIRECT_STATUSES
from reqpipe.errors import MalformedTargetError, RedirectError, TooManyRedirectsError
from reqpipe.pipeline import engine
from reqpipe.pipeline.models import Response
from reqpipe.pipeline.request import parse_target
from reqpipe.pipeline.steps.base import ExchangeStep

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest, Result

logger: ReqpipeLogger = get_logger(__name__)


def resolve_location(current: httpx.URL, location: str) -> httpx.URL:
    """Return the redirect target for ``location`` relative to ``current``.

    Raises:
        MalformedTargetError: If an absolute location cannot be parsed.
    """
    if location.startswith("/"):
        relative: httpx.URL = httpx.URL(location)
        return current.copy_with(raw_path=relative.raw_path)
    return parse_target(location)


class FollowRedirectsStep(ExchangeStep):
    """Follow 301/302 responses by re-running the pipeline.

    Args:
        max_redirects (int): Maximum number of redirects followed per call.
    """

    def __init__(self, max_redirects: int = DEFAULT_MAX_REDIRECTS) -> None:
        super().__init__(name=self.__class__.__name__)
        self.max_redirects: int = max_redirects

    def may_proceed(self, request: PipelineRequest, outcome: Response | Exception) -> bool:
        """Only redirect statuses are followed."""
        return isinstance(outcome, Response) and outcome.status in REDIRECT_STATUSES

    def run(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Resubmit the request to the new location and adopt the nested result."""
        assert isinstance(outcome, Response)
        location: str | None = outcome.get_header("location")
        if not location:
            return request, RedirectError(
                f"{outcome.status} response from {request.url} has no location header"
            )
        if request.private.redirect_count >= self.max_redirects:
            return request, TooManyRedirectsError(self.max_redirects)

        try:
            target: httpx.URL = resolve_location(request.url, location)
        except MalformedTargetError as exc:
            return request, RedirectError(f"cannot follow location {location!r}: {exc.message}")

        logger.debug("%s: Redirecting to %s", self.name, location)
        request.private.redirect_count += 1
        result: Result = engine.run(request.reborn(url=target))
        return request.halt(), result.value
