# topmark:header:start
#
#   project      : ReqPipe
#   file         : transport.py
#   file_relpath : src/reqpipe/transport.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Transport adapter boundary for the ReqPipe executor.

The executor dispatches every non-halted request exactly once through a
`Transport`. The adapter owns connection handling, TLS and pooling; the engine
only relies on the shape of the exchange:

    send(method, url, headers, body) -> Response   # or raise TransportError

`HttpxTransport` is the default adapter. It disables redirect following and
returns the *raw* (still content-encoded) body so that the decompress step
stays the single authority on ``content-encoding``.

`HttpxTransport` is a context manager; leaving the block closes its client.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

import httpx

from reqpipe.config.logging import get_logger
from reqpipe.errors import TransportError
from reqpipe.pipeline.models import Response

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger

logger: ReqpipeLogger = get_logger(__name__)

DEFAULT_TIMEOUT: float = 30.0

_CAMEL_BOUNDARY: re.Pattern[str] = re.compile(r"(?<!^)(?=[A-Z])")


class Transport(Protocol):
    """Protocol for the network exchange collaborator."""

    def send(
        self,
        method: str,
        url: httpx.URL,
        headers: list[tuple[str, str]],
        body: bytes | str,
    ) -> Response:
        """Perform one HTTP exchange.

        Args:
            method (str): The HTTP verb.
            url (httpx.URL): The absolute target.
            headers (list[tuple[str, str]]): Normalized header pairs.
            body (bytes | str): Encoded request payload.

        Returns:
            Response: The received response with an undecoded body.

        Raises:
            TransportError: If the exchange could not be completed.
        """
        ...


def _reason_for(exc: Exception) -> str:
    """Map an exception class to a snake_case reason (``ConnectError`` -> ``connect_error``)."""
    return _CAMEL_BOUNDARY.sub("_", exc.__class__.__name__).lower()


class HttpxTransport:
    """`Transport` backed by an `httpx.Client`.

    Args:
        client (httpx.Client | None): Client to use. When None, a private client
            is created lazily with ``timeout`` and redirects disabled.
        timeout (float): Timeout in seconds for the private client.
    """

    def __init__(self, client: httpx.Client | None = None, *, timeout: float = DEFAULT_TIMEOUT):
        self._client: httpx.Client | None = client
        self._timeout: float = timeout

    @property
    def client(self) -> httpx.Client:
        """The underlying client (created on first use)."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=False)
        return self._client

    def send(
        self,
        method: str,
        url: httpx.URL,
        headers: list[tuple[str, str]],
        body: bytes | str,
    ) -> Response:
        """Send the request and return the raw response (see `Transport.send`)."""
        request: httpx.Request = self.client.build_request(
            method, url, headers=headers, content=body or None
        )
        logger.debug("Dispatching %s %s", method, url)
        try:
            response: httpx.Response = self.client.send(
                request, stream=True, follow_redirects=False
            )
            try:
                raw: bytes = b"".join(response.iter_raw())
            finally:
                response.close()
        except httpx.TransportError as exc:
            reason: str = _reason_for(exc)
            logger.debug("Transport failure for %s %s: %s (%s)", method, url, exc, reason)
            raise TransportError(str(exc) or reason, reason=reason) from exc

        logger.debug("Received %d from %s %s", response.status_code, method, url)
        return Response(
            status=response.status_code,
            headers=response.headers.multi_items(),
            body=raw,
        )

    def close(self) -> None:
        """Close the underlying client, if one was created or supplied."""
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
