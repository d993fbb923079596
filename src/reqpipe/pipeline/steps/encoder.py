# topmark:header:start
#
#   project      : ReqPipe
#   file         : encoder.py
#   file_relpath : src/reqpipe/pipeline/steps/encoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Request body encoding step.

If the body has one of the shapes below, it is encoded and ``content-type`` is
set (first writer wins). Any other body is left unchanged.

| Shape        | Encoder                   | Content-Type                        |
| ------------ | ------------------------- | ----------------------------------- |
| `Form(data)` | `httpx.QueryParams`       | `application/x-www-form-urlencoded` |
| `Json(data)` | `json.dumps` (compact)    | `application/json`                  |

A value the JSON codec cannot serialize yields ``(request, CodecError)``, which
the executor routes to the error phase.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx

from reqpipe.config.logging import get_logger
from reqpipe.errors import CodecError
from reqpipe.pipeline.models import Form, Json
from reqpipe.pipeline.steps.base import RequestStep

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.contracts import Exchange
    from reqpipe.pipeline.models import PipelineRequest

logger: ReqpipeLogger = get_logger(__name__)

FORM_CONTENT_TYPE: str = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE: str = "application/json"


def encode_query(data: Mapping[str, Any] | Sequence[tuple[str, Any]]) -> str:
    """URL-encode ``data`` as a query string, keeping the given order."""
    return str(httpx.QueryParams(data))


def encode_json(data: Any) -> bytes:
    """Serialize ``data`` as compact UTF-8 JSON, keeping mapping key order.

    Raises:
        CodecError: If ``data`` is not JSON-serializable.
    """
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise CodecError(f"cannot encode JSON body: {exc}") from exc


class EncodeStep(RequestStep):
    """Encode `Form` and `Json` bodies and set ``content-type``."""

    def __init__(self) -> None:
        super().__init__(name=self.__class__.__name__)

    def may_proceed(self, request: PipelineRequest) -> bool:
        """Only tagged bodies are encoded."""
        return isinstance(request.body, (Form, Json))

    def run(self, request: PipelineRequest) -> PipelineRequest | Exchange:
        """Replace the tagged body with its encoded bytes."""
        body: Any = request.body
        if isinstance(body, Form):
            request.body = encode_query(body.data).encode("ascii")
            return request.put_new_header("content-type", FORM_CONTENT_TYPE)

        try:
            request.body = encode_json(body.data)
        except CodecError as exc:
            logger.debug("%s: %s", self.name, exc)
            return request, exc
        return request.put_new_header("content-type", JSON_CONTENT_TYPE)
