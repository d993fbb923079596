# topmark:header:start
#
#   project      : ReqPipe
#   file         : test_httpx_transport.py
#   file_relpath : tests/api/test_httpx_transport.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the default httpx-backed transport adapter."""

from __future__ import annotations

import gzip

import httpx
import pytest

from reqpipe.errors import TransportError
from reqpipe.transport import HttpxTransport
from tests.api.conftest import mock_transport, raw_response
from tests.conftest import parametrize

pytestmark: pytest.MarkDecorator = pytest.mark.integration


def test_raw_body_is_not_content_decoded() -> None:
    payload: bytes = gzip.compress(b"hello", mtime=0)

    def handler(request: httpx.Request) -> httpx.Response:
        return raw_response(200, payload, {"content-encoding": "gzip"})

    response = mock_transport(handler).send("GET", httpx.URL("https://t.test/"), [], b"")

    assert response.body == payload
    assert response.get_header("content-encoding") == "gzip"


def test_headers_and_body_are_sent_verbatim() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return raw_response(200)

    mock_transport(handler).send(
        "PUT",
        httpx.URL("https://t.test/x"),
        [("x-trace", "1"), ("x-trace", "2")],
        b"payload",
    )

    assert seen[0].method == "PUT"
    assert seen[0].headers.get_list("x-trace") == ["1", "2"]
    assert seen[0].content == b"payload"


def test_redirects_are_not_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return raw_response(302, headers={"location": "/elsewhere"})

    response = mock_transport(handler).send("GET", httpx.URL("https://t.test/"), [], b"")

    assert response.status == 302
    assert response.get_header("location") == "/elsewhere"


@parametrize(
    ("exc_type", "reason"),
    [
        (httpx.ConnectError, "connect_error"),
        (httpx.ConnectTimeout, "connect_timeout"),
        (httpx.RemoteProtocolError, "remote_protocol_error"),
    ],
)
def test_httpx_failures_become_transport_errors(
    exc_type: type[httpx.TransportError], reason: str
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    with pytest.raises(TransportError) as excinfo:
        mock_transport(handler).send("GET", httpx.URL("https://t.test/"), [], b"")

    assert excinfo.value.reason == reason
    assert excinfo.value.message == "boom"
    assert not excinfo.value.fatal


def test_private_client_is_created_lazily() -> None:
    transport = HttpxTransport(timeout=1.5)

    assert transport._client is None
    client: httpx.Client = transport.client
    assert client.follow_redirects is False
    assert transport.client is client
    transport.close()


def test_context_manager_closes_client() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda _: raw_response(204)))

    with HttpxTransport(client) as transport:
        assert transport.client is client

    assert client.is_closed


def test_close_without_client_is_a_no_op() -> None:
    transport = HttpxTransport()

    transport.close()

    assert transport._client is None
