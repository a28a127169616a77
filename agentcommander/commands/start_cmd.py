"""CLI handler for starting an agent (``agentcommander start`` / ``start-agent``)."""

from __future__ import annotations

import click

from agentcommander.commands._helpers import exit_error, exit_invalid, run, validate_start_options
from agentcommander.config import load_config
from agentcommander.errors import AgentCommanderError
from agentcommander.models.agent import AgentOptions, AgentStartOptions, IsolationMode
from agentcommander.services.agent_controller import Agent

EPILOG = """\b
Examples:
  start-agent --tool claude --working-directory /tmp/dir --prompt Hello
  start-agent --tool claude --working-directory /tmp/dir \\
    --prompt Hello --model opus --fallback-model sonnet
  start-agent --tool claude --working-directory /tmp/dir \\
    --isolation screen --screen-name my-agent --detached
  start-agent --tool claude --working-directory /tmp/dir --dry-run
"""


def _claude_options(
    append_system_prompt: str,
    fallback_model: str,
    verbose: bool,
    session_id: str,
    fork_session: bool,
    replay_user_messages: bool,
) -> dict:
    candidates = {
        "append_system_prompt": append_system_prompt,
        "fallback_model": fallback_model,
        "verbose": verbose,
        "session_id": session_id,
        "fork_session": fork_session,
        "replay_user_messages": replay_user_messages,
    }
    return {key: value for key, value in candidates.items() if value}


@click.command("start", epilog=EPILOG)
@click.option("--tool", default="", help="CLI tool to use (e.g. 'claude') [required]")
@click.option("--working-directory", default="", help="Working directory for the agent [required]")
@click.option("--prompt", default="", help="Prompt for the agent")
@click.option("--system-prompt", default="", help="System prompt for the agent")
@click.option("--append-system-prompt", default="", help="Append to the default system prompt")
@click.option("--model", default="", help="Model to use (e.g. 'sonnet', 'opus', 'haiku')")
@click.option("--fallback-model", default="", help="Fallback model when default is overloaded")
@click.option("--verbose", is_flag=True, help="Enable verbose mode")
@click.option("--resume", default="", help="Resume a previous session by ID")
@click.option("--session-id", default="", help="Use a specific session ID")
@click.option("--fork-session", is_flag=True, help="Create new session ID when resuming")
@click.option("--replay-user-messages", is_flag=True, help="Re-emit user messages on stdout")
@click.option("--json", "json_mode", is_flag=True, help="Request and parse NDJSON output")
@click.option("--isolation", default=None, help="Isolation mode: none, screen, docker")
@click.option("--screen-name", default="", help="Screen session name (screen isolation)")
@click.option("--container-name", default="", help="Container name (docker isolation)")
@click.option("--detached", is_flag=True, help="Run in detached mode")
@click.option("--dry-run", is_flag=True, help="Show command without executing")
def start_command(
    tool: str,
    working_directory: str,
    prompt: str,
    system_prompt: str,
    append_system_prompt: str,
    model: str,
    fallback_model: str,
    verbose: bool,
    resume: str,
    session_id: str,
    fork_session: bool,
    replay_user_messages: bool,
    json_mode: bool,
    isolation: str | None,
    screen_name: str,
    container_name: str,
    detached: bool,
    dry_run: bool,
):
    """Start an agent with the given configuration.

    Unless --detached or --dry-run is given, waits for the agent to finish
    and exits with its exit code.
    """
    try:
        config = load_config()
    except AgentCommanderError as e:
        exit_error(e)
    isolation = isolation or config.isolation.default_mode

    errors = validate_start_options(tool, working_directory, isolation, screen_name, container_name)
    if errors:
        exit_invalid(errors, "start-agent")

    options = AgentOptions(
        tool=tool,
        working_directory=working_directory,
        prompt=prompt,
        system_prompt=system_prompt,
        model=model,
        isolation=isolation,
        screen_name=screen_name,
        container_name=container_name,
        json=json_mode,
        resume=resume,
        tool_options=_claude_options(
            append_system_prompt,
            fallback_model,
            verbose,
            session_id,
            fork_session,
            replay_user_messages,
        ),
    )
    start_options = AgentStartOptions(dry_run=dry_run, detached=detached, attached=not detached)

    async def _start() -> int:
        controller = Agent(options, config)
        await controller.start(start_options)
        if detached or dry_run:
            return 0
        if isolation != IsolationMode.NONE:
            # The session or container ends with the agent; nothing to stop.
            exit_code = await controller.wait()
            return 0 if exit_code is None else exit_code
        result = await controller.stop()
        return result.exit_code

    try:
        exit_code = run(_start())
    except (AgentCommanderError, OSError) as e:
        exit_error(e)
    raise SystemExit(exit_code)
