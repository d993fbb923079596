# topmark:header:start
#
#   project      : ReqPipe
#   file         : request.py
#   file_relpath : src/reqpipe/cli/commands/request.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe `request` command.

Issues one HTTP call through the default pipeline and prints the (decoded)
response body.

Input:
  - ``METHOD`` and ``URL`` positionals.
  - Options are layered: the discovered (or ``--config``) file first, then
    command-line flags. Headers and params from both layers are combined
    (file first); scalar options from the command line win.

Output:
  - With ``--include``, the status line and response headers precede the body.
  - With ``-v``, a one-line summary is written to stderr.
  - With ``-q``, nothing is printed; the exit code still reports failures.

Exit status:
  - ``0`` whenever a response is obtained, whatever its HTTP status.
  - A sysexits-aligned `ExitCode` for failures (see `error_for_failure`).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from reqpipe import api
from reqpipe.cli.errors import (
    ReqpipeConfigError,
    ReqpipeUsageError,
    error_for_failure,
)
from reqpipe.cli.render import render_body, render_head
from reqpipe.cli.validators import parse_credentials, parse_headers, parse_pairs, select_body
from reqpipe.config.io import discover_config, load_config_file
from reqpipe.config.logging import get_logger
from reqpipe.config.options import PipelineOptions
from reqpipe.errors import ConfigError, MalformedTargetError, StepContractError

if TYPE_CHECKING:
    from reqpipe.cli.console import ClickConsole
    from reqpipe.config.logging import ReqpipeLogger
    from reqpipe.pipeline.models import Body, Response, Result

logger: ReqpipeLogger = get_logger(__name__)


def load_file_options(config_path: Path | None, *, no_config: bool) -> dict[str, Any]:
    """Return validated options from ``config_path`` or the discovered config file.

    Raises:
        ReqpipeConfigError: If the file is unreadable or holds invalid options.
    """
    path: Path | None = config_path
    if path is None and not no_config:
        path = discover_config(Path.cwd())
    if path is None:
        return {}
    try:
        data: dict[str, Any] = load_config_file(path)
        PipelineOptions.from_config(data)
    except ConfigError as exc:
        raise ReqpipeConfigError(exc.message) from exc
    logger.info("Using config file %s", path)
    return data


def _merge_pairs(file_value: Any, cli_pairs: list[tuple[str, str]]) -> list[tuple[Any, Any]]:
    pairs: list[tuple[Any, Any]] = list(file_value.items()) if file_value else []
    return pairs + cli_pairs


def merge_options(
    file_options: Mapping[str, Any],
    *,
    headers: list[tuple[str, str]],
    params: list[tuple[str, str]],
    auth: tuple[str, str] | None,
    retry: bool | None,
    retry_delay: int | None,
    max_attempts: int | None,
    max_redirects: int | None,
    decode_csv: bool | None,
    body: Body | None,
) -> dict[str, Any]:
    """Layer command-line values over ``file_options`` into `api.request()` keywords."""
    options: dict[str, Any] = dict(file_options)
    options["headers"] = _merge_pairs(file_options.get("headers"), headers)

    merged_params: list[tuple[Any, Any]] = _merge_pairs(file_options.get("params"), params)
    options["params"] = merged_params or None

    if auth is not None:
        options["auth"] = auth

    file_retry: Any = file_options.get("retry")
    if retry is False:
        options["retry"] = False
    elif retry or retry_delay is not None or max_attempts is not None:
        table: dict[str, Any] = dict(file_retry) if isinstance(file_retry, Mapping) else {}
        if retry_delay is not None:
            table["delay"] = retry_delay
        if max_attempts is not None:
            table["max_attempts"] = max_attempts
        options["retry"] = table or True

    if max_redirects is not None:
        options["max_redirects"] = max_redirects
    if decode_csv is not None:
        options["decode_csv"] = decode_csv
    if body is not None:
        options["body"] = body
    return options


@click.command(
    name="request",
    help="Issue an HTTP request through the default pipeline and print the response body.",
)
@click.argument("method")
@click.argument("url")
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    metavar="NAME:VALUE",
    callback=parse_headers,
    help="Add a request header (repeatable).",
)
@click.option("--data", default=None, help="Raw request body.")
@click.option("--json", "json_text", default=None, help="JSON request body.")
@click.option(
    "--form",
    multiple=True,
    metavar="KEY=VALUE",
    callback=parse_pairs,
    help="URL-encoded form field (repeatable).",
)
@click.option(
    "--param",
    "params",
    multiple=True,
    metavar="KEY=VALUE",
    callback=parse_pairs,
    help="Query parameter appended to the URL (repeatable).",
)
@click.option(
    "--auth",
    default=None,
    metavar="USER:PASS",
    callback=parse_credentials,
    help="Basic-auth credentials.",
)
@click.option(
    "--retry/--no-retry",
    default=None,
    help="Retry 5xx responses and transient failures.",
)
@click.option(
    "--retry-delay",
    type=click.IntRange(min=0),
    default=None,
    metavar="MS",
    help="Milliseconds between attempts (implies --retry).",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum retries after the first attempt (implies --retry).",
)
@click.option(
    "--max-redirects",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of redirects to follow.",
)
@click.option(
    "--decode-csv/--no-decode-csv",
    default=None,
    help="Decode text/csv bodies into rows.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read options from this TOML file instead of discovering one.",
)
@click.option(
    "--no-config",
    is_flag=True,
    help="Do not discover reqpipe.toml / pyproject.toml in the working directory.",
)
@click.option(
    "-i",
    "--include",
    is_flag=True,
    help="Print the status line and response headers before the body.",
)
@click.pass_context
def request_command(
    ctx: click.Context,
    *,
    method: str,
    url: str,
    headers: list[tuple[str, str]],
    data: str | None,
    json_text: str | None,
    form: list[tuple[str, str]],
    params: list[tuple[str, str]],
    auth: tuple[str, str] | None,
    retry: bool | None,
    retry_delay: int | None,
    max_attempts: int | None,
    max_redirects: int | None,
    decode_csv: bool | None,
    config_path: Path | None,
    no_config: bool,
    include: bool,
) -> None:
    """Run ``METHOD URL`` through the default pipeline.

    Raises:
        ReqpipeError: A subclass matching the failure (see `error_for_failure`).
    """
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    body: Body | None = select_body(data=data, json_text=json_text, form=form)
    options: dict[str, Any] = merge_options(
        load_file_options(config_path, no_config=no_config),
        headers=headers,
        params=params,
        auth=auth,
        retry=retry,
        retry_delay=retry_delay,
        max_attempts=max_attempts,
        max_redirects=max_redirects,
        decode_csv=decode_csv,
        body=body,
    )
    if ctx.obj.get("transport") is not None:
        options["transport"] = ctx.obj["transport"]

    try:
        result: Result = api.request(method, url, **options)
    except (ConfigError, MalformedTargetError, StepContractError) as exc:
        raise error_for_failure(exc) from exc
    except ValueError as exc:
        raise ReqpipeUsageError(str(exc)) from exc

    if result.error is not None:
        raise error_for_failure(result.error)

    response: Response = result.unwrap()
    if vlevel > 0:
        console.note(f"{method.upper()} {url} -> {response.status}")
    if vlevel < 0:
        return

    if include:
        for line in render_head(response):
            console.print(line)
        console.print()
    text: str = render_body(response.body)
    if text:
        console.print(text)
