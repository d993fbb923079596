# topmark:header:start
#
#   project      : ReqPipe
#   file         : render.py
#   file_relpath : src/reqpipe/cli/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render responses for terminal output.

The decode step may leave the body as raw ``bytes`` or replace it with parsed
JSON or CSV rows; `render_body()` turns any of these back into text:

| Body                     | Rendered as                         |
| ------------------------ | ----------------------------------- |
| ``bytes``                | UTF-8 text (undecodable bytes as U+FFFD) |
| ``str``                  | as-is                               |
| ``list[list[str]]``      | CSV                                 |
| anything else            | pretty-printed JSON                 |
"""

from __future__ import annotations

import csv
import io
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reqpipe.pipeline.models import Response


def _is_rows(body: Any) -> bool:
    return (
        isinstance(body, list)
        and bool(body)
        and all(isinstance(row, list) and all(isinstance(c, str) for c in row) for row in body)
    )


def render_body(body: Any) -> str:
    """Return ``body`` as text (see module docstring)."""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body
    if _is_rows(body):
        buffer: io.StringIO = io.StringIO()
        csv.writer(buffer, lineterminator="\n").writerows(body)
        return buffer.getvalue().rstrip("\n")
    return json.dumps(body, indent=2, ensure_ascii=False)


def render_head(response: Response) -> list[str]:
    """Return the status line and ``name: value`` header lines."""
    lines: list[str] = [f"HTTP {response.status}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers)
    return lines
