# topmark:header:start
#
#   project      : ReqPipe
#   file         : validators.py
#   file_relpath : src/reqpipe/cli/validators.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI input parsing for ``reqpipe request``.

Click callbacks that turn repeated ``NAME:VALUE`` / ``KEY=VALUE`` arguments
into ordered pairs, and helpers that enforce the body-option policy. All of
them raise `ReqpipeUsageError` on invalid input.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from reqpipe.cli.errors import ReqpipeUsageError
from reqpipe.config.logging import get_logger
from reqpipe.pipeline.models import Form, Json

if TYPE_CHECKING:
    import click

    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.models import Body

logger: ReqpipeLogger = get_logger(__name__)


def _split(value: str, sep: str, what: str) -> tuple[str, str]:
    name, found, rest = value.partition(sep)
    name = name.strip()
    if not found or not name:
        raise ReqpipeUsageError(f"Invalid {what} {value!r}: expected {what.upper()}")
    return name, rest


def parse_headers(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    """Parse repeated ``NAME:VALUE`` header arguments (value whitespace trimmed)."""
    pairs: list[tuple[str, str]] = []
    for raw in values:
        name, value = _split(raw, ":", "name:value")
        pairs.append((name, value.strip()))
    return pairs


def parse_pairs(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    """Parse repeated ``KEY=VALUE`` arguments, preserving order and duplicates."""
    return [_split(raw, "=", "key=value") for raw in values]


def parse_credentials(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[str, str] | None:
    """Parse ``USER:PASS``; the password may itself contain colons."""
    if value is None:
        return None
    return _split(value, ":", "user:pass")


def select_body(
    *,
    data: str | None,
    json_text: str | None,
    form: list[tuple[str, str]],
) -> Body | None:
    """Return the request body selected by ``--data``, ``--json`` or ``--form``.

    Returns:
        Body | None: The body, or None if no body option was given.

    Raises:
        ReqpipeUsageError: If more than one body option is given, or
            ``--json`` is not valid JSON.
    """
    flags: dict[str, bool] = {
        "--data": data is not None,
        "--json": json_text is not None,
        "--form": bool(form),
    }
    given: list[str] = [opt for opt, present in flags.items() if present]
    if len(given) > 1:
        raise ReqpipeUsageError(f"Options {', '.join(given)} are mutually exclusive.")

    if data is not None:
        return data
    if json_text is not None:
        try:
            payload: Any = json.loads(json_text)
        except json.JSONDecodeError as exc:
            raise ReqpipeUsageError(f"Invalid --json value: {exc}") from exc
        return Json(payload)
    if form:
        return Form(form)
    return None
