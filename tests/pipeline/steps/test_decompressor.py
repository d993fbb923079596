# topmark:header:start
#
#   project      : ReqPipe
#   file         : test_decompressor.py
#   file_relpath : tests/pipeline/steps/test_decompressor.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the decompress step (``content-encoding`` handling)."""

from __future__ import annotations

import zlib
from typing import TYPE_CHECKING, Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from reqpipe.errors import CodecError, UnsupportedEncodingError
from reqpipe.pipeline.models import Response
from reqpipe.pipeline.steps.decompressor import (
    DecompressStep,
    content_encodings,
    decompress_body,
)
from tests.conftest import parametrize
from tests.pipeline.conftest import gzip_bytes, make_request

if TYPE_CHECKING:
    from reqpipe.pipeline.models import PipelineRequest

pytestmark: pytest.MarkDecorator = pytest.mark.pipeline


def _run(response: Response) -> tuple[PipelineRequest, Any]:
    req: PipelineRequest = make_request()
    return DecompressStep()(req, response)


def test_gzip_body_is_decompressed() -> None:
    response = Response(
        status=200, headers=[("content-encoding", "gzip")], body=gzip_bytes(b"hello")
    )

    _, outcome = _run(response)

    assert outcome.body == b"hello"
    assert outcome.headers == response.headers


@parametrize(
    "value, expected",
    [
        ("gzip", ["gzip"]),
        ("gzip, deflate", ["deflate", "gzip"]),
        (" GZIP ,identity ", ["identity", "gzip"]),
        ("", []),
    ],
)
def test_content_encodings_are_normalized_and_reversed(value: str, expected: list[str]) -> None:
    response = Response(status=200, headers=[("Content-Encoding", value)])
    assert content_encodings(response) == expected


def test_stacked_encodings_are_undone_last_first() -> None:
    """``gzip, deflate``: gzip applied first, so deflate is undone first."""
    body: bytes = zlib.compress(gzip_bytes(b"payload"))
    response = Response(status=200, headers=[("content-encoding", "gzip, deflate")], body=body)

    _, outcome = _run(response)

    assert outcome.body == b"payload"


def test_raw_deflate_stream_is_accepted() -> None:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    raw: bytes = compressor.compress(b"raw deflate") + compressor.flush()

    assert decompress_body(raw, ["deflate"]) == b"raw deflate"


def test_no_content_encoding_passes_through() -> None:
    response = Response(status=200, body=b"plain")

    req, outcome = _run(response)

    assert outcome is response
    assert not req.halted


def test_failures_pass_through_untouched() -> None:
    failure = CodecError("x")
    req: PipelineRequest = make_request()

    assert DecompressStep()(req, failure) == (req, failure)


def test_unknown_algorithm_yields_fatal_failure() -> None:
    response = Response(status=200, headers=[("content-encoding", "br")], body=b"...")

    _, outcome = _run(response)

    assert isinstance(outcome, UnsupportedEncodingError)
    assert outcome.fatal
    assert outcome.message == "unsupported decompression algorithm: 'br'"


def test_corrupt_gzip_yields_codec_failure() -> None:
    response = Response(status=200, headers=[("content-encoding", "gzip")], body=b"not gzip")

    _, outcome = _run(response)

    assert isinstance(outcome, CodecError)
    assert not outcome.fatal


@settings(max_examples=50)
@given(data=st.binary(max_size=2048))
def test_gzip_decompression_inverts_compression(data: bytes) -> None:
    assert decompress_body(gzip_bytes(data), ["gzip"]) == data
    assert decompress_body(zlib.compress(data), ["deflate"]) == data
