# topmark:header:start
#
#   project      : ReqPipe
#   file         : conftest.py
#   file_relpath : tests/pipeline/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared test utilities for the ReqPipe pipeline tests.

Key utilities:
  * RecordingTransport: a scripted `Transport` that records every dispatch and
    replays queued responses (or raises queued failures).
  * make_request(...): builds a bare `PipelineRequest` wired to a transport.
  * gzip_bytes(...): deterministic gzip payloads for decompression tests.
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from reqpipe.pipeline.models import Response
from reqpipe.pipeline.request import build

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reqpipe.pipeline.models import Body, PipelineRequest


@dataclass
class Dispatch:
    """One recorded call to `RecordingTransport.send`."""

    method: str
    url: httpx.URL
    headers: list[tuple[str, str]]
    body: bytes | str


@dataclass
class RecordingTransport:
    """Scripted transport double.

    Outcomes are consumed in order; once exhausted, the last one is repeated.
    An outcome that is an exception instance is raised instead of returned.
    """

    outcomes: list[Response | Exception] = field(default_factory=lambda: [Response(status=200)])
    calls: list[Dispatch] = field(default_factory=lambda: [])

    def send(
        self,
        method: str,
        url: httpx.URL,
        headers: list[tuple[str, str]],
        body: bytes | str,
    ) -> Response:
        """Record the dispatch and return (or raise) the next scripted outcome."""
        self.calls.append(Dispatch(method=method, url=url, headers=list(headers), body=body))
        index: int = min(len(self.calls), len(self.outcomes)) - 1
        outcome: Response | Exception = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def urls(self) -> list[str]:
        """Dispatched URLs as strings, in order."""
        return [str(c.url) for c in self.calls]


def make_request(
    url: str = "https://example.test/resource",
    *,
    method: str = "GET",
    transport: RecordingTransport | None = None,
    headers: Iterable[tuple[Any, str]] | None = None,
    body: Body = b"",
) -> PipelineRequest:
    """Return a bare request (no steps) bound to ``transport``."""
    return build(
        method,
        url,
        headers=headers,
        body=body,
        transport=transport if transport is not None else RecordingTransport(),
    )


def gzip_bytes(data: bytes) -> bytes:
    """Return ``data`` gzip-compressed with a fixed mtime."""
    return gzip.compress(data, mtime=0)
