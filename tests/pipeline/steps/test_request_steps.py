# topmark:header:start
#
#   project      : ReqPipe
#   file         : test_request_steps.py
#   file_relpath : tests/pipeline/steps/test_request_steps.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the request-phase steps.

Covers header normalization, default headers, basic auth, body encoding and
query params. Each step is invoked directly, outside the executor.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Any

import pytest

from reqpipe.constants import USER_AGENT
from reqpipe.errors import CodecError
from reqpipe.pipeline.models import Form, Header, Json
from reqpipe.pipeline.steps.authenticator import AuthStep, basic_auth_value
from reqpipe.pipeline.steps.defaults import DefaultHeadersStep
from reqpipe.pipeline.steps.encoder import EncodeStep, encode_json
from reqpipe.pipeline.steps.normalizer import NormalizeHeadersStep
from reqpipe.pipeline.steps.params import ParamsStep
from tests.conftest import parametrize
from tests.pipeline.conftest import make_request

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest

pytestmark: pytest.MarkDecorator = pytest.mark.pipeline


# --- normalizer ---


def test_normalizer_converts_symbolic_names_and_keeps_strings() -> None:
    req: PipelineRequest = make_request(
        headers=[(Header.USER_AGENT, "a"), ("X-Custom", "b"), (Header.ACCEPT_ENCODING, "c")]
    )

    NormalizeHeadersStep()(req)

    assert req.headers == [("user-agent", "a"), ("X-Custom", "b"), ("accept-encoding", "c")]


# --- defaults ---


def test_defaults_add_user_agent_and_accept_encoding() -> None:
    req: PipelineRequest = make_request()

    DefaultHeadersStep()(req)

    assert req.get_header("user-agent") == USER_AGENT
    assert USER_AGENT.startswith("reqpipe/")
    assert req.get_header("accept-encoding") == "gzip"


def test_defaults_never_override_caller_headers() -> None:
    req: PipelineRequest = make_request(headers=[("User-Agent", "custom/1.0")])

    DefaultHeadersStep()(req)

    assert [v for k, v in req.headers if k.lower() == "user-agent"] == ["custom/1.0"]


# --- authenticator ---


def test_basic_auth_value() -> None:
    assert basic_auth_value("foo", "bar") == "Basic Zm9vOmJhcg=="


def test_auth_sets_authorization_once() -> None:
    req: PipelineRequest = make_request()

    AuthStep("foo", "bar")(req)

    assert req.headers == [("authorization", "Basic Zm9vOmJhcg==")]


def test_auth_keeps_existing_authorization() -> None:
    req: PipelineRequest = make_request(headers=[("Authorization", "Bearer t")])

    AuthStep("foo", "bar")(req)

    assert req.headers == [("Authorization", "Bearer t")]


@parametrize("username, password", [(1, "x"), ("x", None), (b"u", "p")])
def test_auth_rejects_non_string_credentials(username: Any, password: Any) -> None:
    with pytest.raises(TypeError):
        AuthStep(username, password)


def test_auth_repr_masks_password() -> None:
    assert "bar" not in repr(AuthStep("foo", "bar"))


# --- encoder ---


def test_encode_json_is_compact_and_ordered() -> None:
    body: OrderedDict[str, Any] = OrderedDict([("b", 1), ("a", [1, 2])])
    assert encode_json(body) == b'{"b":1,"a":[1,2]}'


def test_encoder_json_body() -> None:
    req: PipelineRequest = make_request(method="POST", body=Json({"a": 1}))

    EncodeStep()(req)

    assert req.body == b'{"a":1}'
    assert req.headers == [("content-type", "application/json")]


def test_encoder_form_body() -> None:
    req: PipelineRequest = make_request(method="POST", body=Form({"q": "a b", "n": 1}))

    EncodeStep()(req)

    assert req.body == b"q=a+b&n=1"
    assert req.get_header("content-type") == "application/x-www-form-urlencoded"


def test_encoder_keeps_caller_content_type() -> None:
    req: PipelineRequest = make_request(
        method="POST",
        body=Json([1]),
        headers=[("content-type", "application/vnd.api+json")],
    )

    EncodeStep()(req)

    assert req.body == b"[1]"
    assert req.headers == [("content-type", "application/vnd.api+json")]


def test_encoder_leaves_raw_bodies_alone() -> None:
    req: PipelineRequest = make_request(method="POST", body=b"raw")

    assert EncodeStep()(req) is req
    assert req.body == b"raw"
    assert req.headers == []


def test_encoder_returns_codec_failure_for_unserializable_json() -> None:
    req: PipelineRequest = make_request(method="POST", body=Json({"when": object()}))

    returned: Any = EncodeStep()(req)

    assert isinstance(returned, tuple)
    assert returned[0] is req
    assert isinstance(returned[1], CodecError)


# --- params ---


def test_params_set_query_on_url_without_one() -> None:
    req: PipelineRequest = make_request("https://example.test/search")

    ParamsStep({"q": "x y", "page": 2})(req)

    assert str(req.url) == "https://example.test/search?q=x+y&page=2"


def test_params_append_to_existing_query_without_dedup() -> None:
    req: PipelineRequest = make_request("https://example.test/search?q=a")

    ParamsStep([("q", "b"), ("q", "c")])(req)

    assert str(req.url) == "https://example.test/search?q=a&q=b&q=c"


def test_empty_params_leave_url_untouched() -> None:
    req: PipelineRequest = make_request("https://example.test/search?q=a")

    ParamsStep({})(req)

    assert str(req.url) == "https://example.test/search?q=a"
