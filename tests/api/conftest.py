# topmark:header:start
#
#   project      : ReqPipe
#   file         : conftest.py
#   file_relpath : tests/api/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared helpers for tests that go through the real httpx transport.

`mock_transport(handler)` wires an `httpx.MockTransport` into an
`HttpxTransport`, so requests exercise the whole stack (client, streaming,
raw body capture) without touching the network.

Handlers must build responses with ``stream=httpx.ByteStream(...)``: a
response built with ``content=`` is read (and content-decoded) on
construction, whereas the transport reads the raw stream.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx

from reqpipe.transport import HttpxTransport

Handler = Callable[[httpx.Request], httpx.Response]


def mock_transport(handler: Handler) -> HttpxTransport:
    """Return an `HttpxTransport` whose client answers through ``handler``."""
    client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=False)
    return HttpxTransport(client)


def raw_response(
    status: int, body: bytes = b"", headers: dict[str, str] | None = None
) -> httpx.Response:
    """Return a streaming `httpx.Response` carrying ``body`` verbatim."""
    return httpx.Response(status, headers=headers, stream=httpx.ByteStream(body))
