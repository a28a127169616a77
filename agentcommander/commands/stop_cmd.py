"""CLI handler for stopping a detached agent (``agentcommander stop`` / ``stop-agent``)."""

from __future__ import annotations

import click

from agentcommander.commands._helpers import exit_error, exit_invalid, run, validate_stop_options
from agentcommander.config import load_config
from agentcommander.errors import AgentCommanderError
from agentcommander.models.agent import AgentOptions, AgentStopOptions
from agentcommander.services.agent_controller import Agent

EPILOG = """\b
Examples:
  stop-agent --isolation screen --screen-name my-agent
  stop-agent --isolation docker --container-name my-container
  stop-agent --isolation screen --screen-name my-agent --dry-run
"""


@click.command("stop", epilog=EPILOG)
@click.option("--isolation", default="", help="Isolation mode: screen, docker [required]")
@click.option("--screen-name", default="", help="Screen session name (screen isolation)")
@click.option("--container-name", default="", help="Container name (docker isolation)")
@click.option("--dry-run", is_flag=True, help="Show command without executing")
def stop_command(isolation: str, screen_name: str, container_name: str, dry_run: bool):
    """Stop an agent running in a screen session or docker container."""
    errors = validate_stop_options(isolation, screen_name, container_name)
    if errors:
        exit_invalid(errors, "stop-agent")

    try:
        config = load_config()
    except AgentCommanderError as e:
        exit_error(e)
    # Tool and directory play no part in stopping an isolated agent.
    options = AgentOptions(
        tool="stop",
        working_directory="/tmp",
        isolation=isolation,
        screen_name=screen_name,
        container_name=container_name,
    )

    async def _stop() -> int:
        controller = Agent(options, config)
        result = await controller.stop(AgentStopOptions(dry_run=dry_run))
        return result.exit_code

    try:
        exit_code = run(_stop())
    except (AgentCommanderError, OSError) as e:
        exit_error(e)
    click.echo("Agent stopped successfully")
    raise SystemExit(exit_code)
