# topmark:header:start
#
#   project      : ReqPipe
#   file         : version.py
#   file_relpath : src/reqpipe/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe `version` command.

Prints the current ReqPipe version as installed in the active Python environment.
"""

from __future__ import annotations

import json

import click

from reqpipe.cli.console import ClickConsole
from reqpipe.constants import REQPIPE_VERSION, USER_AGENT


@click.command(
    name="version",
    help="Show the current version of ReqPipe.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (text, json).",
)
def version_command(*, output_format: str = "text") -> None:
    """Show the current version of ReqPipe.

    Args:
        output_format (str): ``text`` (default) or ``json``.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    if output_format == "json":
        console.print(json.dumps({"version": REQPIPE_VERSION, "user_agent": USER_AGENT}))
    elif vlevel > 0:
        console.print(console.styled("ReqPipe version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(REQPIPE_VERSION, bold=True)}")
        console.print(f"    user-agent: {USER_AGENT}")
    else:
        console.print(console.styled(REQPIPE_VERSION, bold=True))
