# topmark:header:start
#
#   project      : ReqPipe
#   file         : decoder.py
#   file_relpath : src/reqpipe/pipeline/steps/decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Response decoding step.

Decodes the response body based on its ``content-type`` (parameters such as
``charset`` are ignored; ``application/x-gzip`` is treated as
``application/gzip``):

| Media type                                 | Decoder                         |
| ------------------------------------------ | ------------------------------- |
| ``application/json``, ``text/json``, ``*+json`` | `json.loads`               |
| ``application/gzip``                       | `gzip.decompress`               |
| ``text/csv``                               | injected CSV decoder (optional) |

The CSV decoder is supplied when the pipeline is assembled; without one, CSV
bodies pass through unchanged. Unknown or missing content types, and empty
bodies, pass through unchanged. Malformed input yields ``(request, CodecError)``.
"""

from __future__ import annotations

import csv
import gzip
import io
import json
import zlib
from typing import TYPE_CHECKING, Any, Callable

from reqpipe.config.logging import get_logger
from reqpipe.errors import CodecError
from reqpipe.pipeline.steps.base import ExchangeStep

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest, Response

logger: ReqpipeLogger = get_logger(__name__)

CsvDecoder = Callable[[bytes], list[list[str]]]


def parse_csv(body: bytes) -> list[list[str]]:
    """Parse an RFC 4180 CSV body into rows; the header row is kept."""
    return list(csv.reader(io.StringIO(body.decode("utf-8"), newline="")))


def media_type(content_type: str) -> str:
    """Return the bare, lowercased media type of a ``content-type`` value."""
    mime: str = content_type.split(";", 1)[0].strip().lower()
    return "application/gzip" if mime == "application/x-gzip" else mime


def _is_json(mime: str) -> bool:
    return mime in ("application/json", "text/json") or mime.endswith("+json")


class DecodeStep(ExchangeStep):
    """Decode the response body according to ``content-type``.

    Args:
        csv_decoder (CsvDecoder | None): Decoder for ``text/csv`` bodies, or
            None to leave CSV untouched.
    """

    def __init__(self, csv_decoder: CsvDecoder | None = parse_csv) -> None:
        super().__init__(name=self.__class__.__name__)
        self.csv_decoder: CsvDecoder | None = csv_decoder

    def decoder_for(self, mime: str) -> Callable[[bytes], Any] | None:
        """Return the decoder for ``mime``, or None to pass the body through."""
        if _is_json(mime):
            return json.loads
        if mime == "application/gzip":
            return gzip.decompress
        if mime == "text/csv":
            return self.csv_decoder
        return None

    def run(self, request: PipelineRequest, outcome: Response | Exception) -> Exchange:
        """Return the response with a decoded body, or a failure."""
        assert not isinstance(outcome, Exception)
        content_type: str | None = outcome.get_header("content-type")
        if content_type is None or not isinstance(outcome.body, (bytes, bytearray)):
            return request, outcome
        if not outcome.body:
            return request, outcome

        mime: str = media_type(content_type)
        decoder: Callable[[bytes], Any] | None = self.decoder_for(mime)
        if decoder is None:
            logger.trace("%s: no decoder for %r", self.name, mime)
            return request, outcome
        try:
            body: Any = decoder(bytes(outcome.body))
        except (ValueError, OSError, EOFError, zlib.error, csv.Error) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.error("%s: cannot decode %s body: %s", self.name, mime, exc)
            return request, CodecError(f"cannot decode {mime} body: {exc}")
        return request, outcome.with_body(body)
