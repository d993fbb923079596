# topmark:header:start
#
#   project      : ReqPipe
#   file         : normalizer.py
#   file_relpath : src/reqpipe/pipeline/steps/normalizer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Header normalization step.

Turns non-string header names into strings, e.g. ``Header.USER_AGENT`` becomes
``"user-agent"``. String names are kept as is, including their casing, so the
step is idempotent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reqpipe.pipeline.models import normalize_header_name
from reqpipe.pipeline.steps.base import RequestStep

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest


class NormalizeHeadersStep(RequestStep):
    """Convert symbolic header names to their wire form."""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def run(self, request: PipelineRequest) -> PipelineRequest:
        """Rewrite ``request.headers`` with string names only."""
        request.headers = [(normalize_header_name(name), value) for name, value in request.headers]
        return request
