"""Click CLI definitions - main entry point."""

from __future__ import annotations

import click

from agentcommander.commands._helpers import configure_logging
from agentcommander.commands.config_cmd import config_group
from agentcommander.commands.start_cmd import start_command
from agentcommander.commands.stop_cmd import stop_command
from agentcommander.commands.tools_cmd import tools_group


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug: bool) -> None:
    """agentcommander - start, stop and observe coding agent CLIs."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(start_command, "start")
cli.add_command(stop_command, "stop")
cli.add_command(tools_group, "tools")
cli.add_command(config_group, "config")


if __name__ == "__main__":
    cli()
