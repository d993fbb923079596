# topmark:header:start
#
#   project      : ReqPipe
#   file         : defaults.py
#   file_relpath : src/reqpipe/pipeline/steps/defaults.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Default request headers step.

Adds ``user-agent`` and ``accept-encoding: gzip`` unless the caller (or an
earlier step) already set them; names are compared case-insensitively.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reqpipe.constants import USER_AGENT
from reqpipe.pipeline.steps.base import RequestStep

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest


class DefaultHeadersStep(RequestStep):
    """Set common headers with first-writer-wins semantics.

    Args:
        user_agent (str): Value for ``user-agent`` (default: ``reqpipe/<version>``).
    """

    def __init__(self, user_agent: str = USER_AGENT) -> None:
        super().__init__(name=self.__class__.__name__)
        self.user_agent: str = user_agent

    def run(self, request: PipelineRequest) -> PipelineRequest:
        """Add the default headers that are not present yet."""
        return request.put_new_header("user-agent", self.user_agent).put_new_header(
            "accept-encoding", "gzip"
        )
