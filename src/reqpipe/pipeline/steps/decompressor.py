# topmark:header:start
#
#   project      : ReqPipe
#   file         : decompressor.py
#   file_relpath : src/reqpipe/pipeline/steps/decompressor.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Response decompression step.

Reads ``content-encoding``, splits it on commas and undoes each coding in
*reverse* order of declaration: ``content-encoding: deflate, gzip`` means the
body was deflated first and gzipped last, so gzip is undone first.

Supported codings: ``gzip`` / ``x-gzip``, ``deflate`` (zlib-wrapped or raw) and
``identity``. Any other coding yields ``(request, UnsupportedEncodingError)``;
corrupt data yields ``(request, CodecError)``.
"""

from __future__ import annotations

import gzip
import zlib
from typing import TYPE_CHECKING, Callable, Final

from reqpipe.config.logging import get_logger
from reqpipe.errors import CodecError, UnsupportedEncodingError
from reqpipe.pipeline.steps.base import ExchangeStep

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest, Response

logger: ReqpipeLogger = get_logger(__name__)


def _gunzip(body: bytes) -> bytes:
    return gzip.decompress(body)


def _inflate(body: bytes) -> bytes:
    try:
        return zlib.decompress(body)
    except zlib.error:
        # Raw deflate stream without the zlib wrapper
        return zlib.decompress(body, wbits=-zlib.MAX_WBITS)


def _identity(body: bytes) -> bytes:
    return body


DECOMPRESSORS: Final[dict[str, Callable[[bytes], bytes]]] = {
    "gzip": _gunzip,
    "x-gzip": _gunzip,
    "deflate": _inflate,
    "identity": _identity,
}


def content_encodings(response: Response) -> list[str]:
    """Return the codings to undo, in application order (last declared first)."""
    value: str | None = response.get_header("content-encoding")
    if value is None:
        return []
    codings: list[str] = [part.strip() for part in value.lower().split(",")]
    return [coding for coding in reversed(codings) if coding]


def decompress_body(body: bytes, algorithms: list[str]) -> bytes:
    """Undo each coding in ``algorithms`` in order.

    Raises:
        UnsupportedEncodingError: On an unknown coding.
        CodecError: On corrupt or non-bytes input.
    """
    for algorithm in algorithms:
        decompressor: Callable[[bytes], bytes] | None = DECOMPRESSORS.get(algorithm)
        if decompressor is None:
            raise UnsupportedEncodingError(algorithm)
        if not isinstance(body, (bytes, bytearray)):
            raise CodecError(f"cannot {algorithm}-decode a {type(body).__name__} body")
        try:
            body = decompressor(bytes(body))
        except (OSError, EOFError, zlib.error) as exc:
            raise CodecError(f"corrupt {algorithm} body: {exc}") from exc
    return body


class DecompressStep(ExchangeStep):
    """Decompress the response body according to ``content-encoding``."""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def run(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Return the response with a decompressed body, or a failure."""
        assert not isinstance(outcome, Exception)
        algorithms: list[str] = content_encodings(outcome)
        if not algorithms:
            return request, outcome
        try:
            body: bytes = decompress_body(outcome.body, algorithms)
        except (UnsupportedEncodingError, CodecError) as exc:
            logger.error("%s: %s", self.name, exc)
            return request, exc
        logger.trace("%s: undid %s", self.name, ", ".join(algorithms))
        return request, outcome.with_body(body)
