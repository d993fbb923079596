# topmark:header:start
#
#   project      : ReqPipe
#   file         : errors.py
#   file_relpath : src/reqpipe/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the ReqPipe CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. `error_for_failure()` maps a pipeline failure
    (a [`PipelineError`][reqpipe.errors.PipelineError] value) onto the matching
    CLI error.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from reqpipe.cli.exit_codes import ExitCode
from reqpipe.errors import (
    CodecError,
    ConfigError,
    MalformedTargetError,
    RedirectError,
    TransportError,
    UnsupportedEncodingError,
)


class ReqpipeError(click.ClickException):
    """Base class for all ReqPipe CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx: click.Context | None = click.get_current_context(silent=True)
        console: Any = ctx.obj.get("console") if ctx and isinstance(ctx.obj, dict) else None
        if console is None:
            super().show(file)
            return
        console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))


class ReqpipeUsageError(ReqpipeError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class ReqpipeDataError(ReqpipeError):
    """Error for bodies that could not be encoded or decoded."""

    exit_code = ExitCode.DATA_ERROR


class ReqpipeUnavailableError(ReqpipeError):
    """Error for transport failures and redirects that could not be followed."""

    exit_code = ExitCode.UNAVAILABLE


class ReqpipePipelineError(ReqpipeError):
    """Error for internal pipeline failures (step contract violation)."""

    exit_code = ExitCode.PIPELINE_ERROR


class ReqpipeConfigError(ReqpipeError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


def error_for_failure(failure: Exception) -> ReqpipeError:
    """Return the CLI error matching a pipeline ``failure``.

    Args:
        failure (Exception): The failure carried by a `Result`, or raised by
            the API for programmer errors.

    Returns:
        ReqpipeError: The error to raise from the command.
    """
    message: str = str(failure)
    if isinstance(failure, ConfigError):
        return ReqpipeConfigError(message)
    if isinstance(failure, MalformedTargetError):
        return ReqpipeUsageError(message)
    if isinstance(failure, (CodecError, UnsupportedEncodingError)):
        return ReqpipeDataError(message)
    if isinstance(failure, (TransportError, RedirectError)):
        return ReqpipeUnavailableError(message)
    return ReqpipePipelineError(f"{failure.__class__.__name__}: {message}")
