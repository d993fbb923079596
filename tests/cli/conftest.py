# topmark:header:start
#
#   project      : ReqPipe
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running ReqPipe against a scripted transport.

`run_cli()` invokes the Click CLI with a `click.testing.CliRunner`, injecting
an optional transport into ``ctx.obj`` so no network access happens.
`run_cli_in()` additionally changes the working directory to ``tmp_path``,
so config discovery (``reqpipe.toml`` / ``pyproject.toml``) is evaluated
against files created by the test.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Sequence

from click.testing import CliRunner, Result

from reqpipe.cli.exit_codes import ExitCode
from reqpipe.cli.main import cli

if TYPE_CHECKING:
    from pathlib import Path

    from reqpipe.transport import Transport


def run_cli(argv: str | Sequence[str] | None, *, transport: Transport | None = None) -> Result:
    """Invoke the CLI without changing the working directory.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["--help"]``.
        transport (Transport | None): Transport injected into the Click context
            object; used by the ``request`` command instead of the httpx default.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.
    """
    obj: dict[str, Any] = {}
    if transport is not None:
        obj["transport"] = transport  # inject test override into Click's context object
    return CliRunner().invoke(cli, argv, obj=obj)


def run_cli_in(
    tmp_path: Path,
    argv: str | Sequence[str] | None,
    *,
    transport: Transport | None = None,
) -> Result:
    """Invoke the CLI with ``tmp_path`` as the working directory.

    See `run_cli` for the arguments.
    """
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return run_cli(argv, transport=transport)
    finally:
        os.chdir(cwd)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_exit(result: Result, code: ExitCode) -> None:
    """Assert that the command exited with ``code``."""
    assert result.exit_code == code, result.output
