# topmark:header:start
#
#   project      : ReqPipe
#   file         : params.py
#   file_relpath : src/reqpipe/pipeline/steps/params.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Query parameters step.

Appends URL-encoded parameters to the target's query string, in caller order
and without deduplicating against parameters already present:

    https://host/p?a=1  +  [("b", "2")]  ->  https://host/p?a=1&b=2
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from reqpipe.pipeline.steps.base import RequestStep
from reqpipe.pipeline.steps.encoder import encode_query

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from reqpipe.pipeline.models import PipelineRequest


class ParamsStep(RequestStep):
    """Append ``params`` to the request URL's query string."""

    def __init__(self, params: Mapping[str, Any] | Sequence[tuple[str, Any]]) -> None:
        super().__init__(name=self.__class__.__name__)
        self.params: Mapping[str, Any] | Sequence[tuple[str, Any]] = params

    def run(self, request: PipelineRequest) -> PipelineRequest:
        """Rewrite ``request.url`` with the extended query."""
        encoded: str = encode_query(self.params)
        if not encoded:
            return request
        current: bytes = request.url.query
        query: bytes = encoded.encode("ascii")
        if current:
            query = current + b"&" + query
        request.url = request.url.copy_with(query=query)
        return request
