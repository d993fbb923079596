# topmark:header:start
#
#   project      : ReqPipe
#   file         : main.py
#   file_relpath : src/reqpipe/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe Click CLI.

Key ideas:
- Group-level options (verbosity, color) are initialized once and placed into
  ``ctx.obj``.
- Tests may pre-populate ``ctx.obj`` (e.g. ``{"transport": ...}``) through
  `click.testing.CliRunner.invoke(obj=...)`; existing keys are preserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from reqpipe.cli.commands.request import request_command
from reqpipe.cli.commands.version import version_command
from reqpipe.cli.console import ClickConsole
from reqpipe.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from reqpipe.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from reqpipe.config.logging import ReqpipeLogger

logger: ReqpipeLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Program-output verbosity:
    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    # Internal logging via env:
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective: ColorMode | None = ColorMode.NEVER if no_color else color_mode
    enable_color: bool = resolve_color_mode(color_mode_override=effective)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="ReqPipe: run HTTP requests through a step pipeline.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the ReqPipe CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=ColorMode(color_mode) if color_mode else None,
        no_color=no_color,
    )
    console: ClickConsole = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'reqpipe request METHOD URL' to issue a request.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(request_command)

if __name__ == "__main__":
    cli()
