# topmark:header:start
#
#   project      : ReqPipe
#   file         : test_request.py
#   file_relpath : tests/pipeline/test_request.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for request construction and step attachment."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest

from reqpipe.errors import MalformedTargetError
from reqpipe.pipeline.models import HttpMethod, PrivateState
from reqpipe.pipeline.request import (
    add_error_steps,
    add_request_steps,
    add_response_steps,
    build,
    parse_target,
)
from reqpipe.transport import HttpxTransport
from tests.conftest import parametrize
from tests.pipeline.conftest import RecordingTransport, make_request

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest

pytestmark: pytest.MarkDecorator = pytest.mark.pipeline


def _noop(request: PipelineRequest) -> PipelineRequest:
    return request


def _noop_exchange(request: PipelineRequest, outcome: Any) -> Any:
    return request, outcome


def test_build_returns_bare_request() -> None:
    transport = RecordingTransport()
    req: PipelineRequest = build(
        "get", "https://example.test/a?b=1", headers=[("accept", "*/*")], transport=transport
    )

    assert req.method is HttpMethod.GET
    assert req.url == httpx.URL("https://example.test/a?b=1")
    assert req.headers == [("accept", "*/*")]
    assert req.body == b""
    assert req.request_steps == []
    assert req.response_steps == []
    assert req.error_steps == []
    assert req.halted is False
    assert req.private == PrivateState()
    assert req.transport is transport


def test_build_defaults_to_httpx_transport() -> None:
    req: PipelineRequest = build(HttpMethod.POST, "http://example.test/")

    assert isinstance(req.transport, HttpxTransport)


@parametrize(
    "target",
    [
        "not a url",
        "/relative/path",
        "ftp://example.test/file",
        "https://",
        "http://example.test:notaport/",
    ],
)
def test_build_rejects_malformed_targets(target: str) -> None:
    with pytest.raises(MalformedTargetError):
        build("GET", target, transport=RecordingTransport())


def test_malformed_target_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_target("mailto:someone@example.test")


def test_build_rejects_unknown_method() -> None:
    with pytest.raises(ValueError, match="Unknown HTTP method"):
        build("FETCH", "https://example.test/", transport=RecordingTransport())


def test_add_steps_append_in_order_without_deduplication() -> None:
    req: PipelineRequest = make_request()

    returned: PipelineRequest = add_request_steps(req, [_noop])
    add_request_steps(req, [_noop])
    add_response_steps(req, [_noop_exchange])
    add_error_steps(req, [_noop_exchange, _noop_exchange])

    assert returned is req
    assert req.request_steps == [_noop, _noop]
    assert req.response_steps == [_noop_exchange]
    assert req.error_steps == [_noop_exchange, _noop_exchange]


def test_reborn_starts_from_submitted_snapshot_and_shares_state() -> None:
    req: PipelineRequest = make_request("https://example.test/a", headers=[("accept", "*/*")])
    add_request_steps(req, [_noop])
    req.snapshot()
    req.headers.append(("authorization", "Basic x"))
    req.url = req.url.copy_with(query=b"page=1")
    req.halt()

    fresh: PipelineRequest = req.reborn()

    assert fresh is not req
    assert fresh.halted is False
    assert str(fresh.url) == "https://example.test/a"
    assert fresh.headers == [("accept", "*/*")]
    assert fresh.private is req.private
    assert fresh.request_steps is req.request_steps
    assert fresh.transport is req.transport


def test_reborn_with_url_retargets_the_snapshot() -> None:
    req: PipelineRequest = make_request("https://example.test/a")
    req.snapshot()
    target = httpx.URL("https://other.test/b")

    fresh: PipelineRequest = req.reborn(url=target)

    assert fresh.url == target
    assert fresh.submitted is not None
    assert fresh.submitted.url == target
    assert fresh.reborn().url == target


def test_put_new_header_is_first_writer_wins_and_case_insensitive() -> None:
    req: PipelineRequest = make_request(headers=[("User-Agent", "mine")])

    req.put_new_header("user-agent", "default").put_new_header("accept", "*/*")

    assert req.headers == [("accept", "*/*"), ("User-Agent", "mine")]
    assert req.get_header("USER-AGENT") == "mine"
