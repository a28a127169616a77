"""Build shell command strings for agent tools and isolation wrappers."""

from __future__ import annotations

import logging
import shlex
import time

from agentcommander.infra.shell import (
    build_piped_command,
    escape_for_bash_c,
    escape_single_quotes,
)
from agentcommander.infra.tools.registry import get_tool, is_tool_supported
from agentcommander.models.agent import (
    AgentCommandOptions,
    BuildParams,
    CommandSpec,
    IsolationMode,
)

logger = logging.getLogger(__name__)

DEFAULT_DOCKER_IMAGE = "node:18-slim"

__all__ = [
    "build_agent_command",
    "build_docker_stop_command",
    "build_piped_command",
    "build_screen_stop_command",
    "build_tool_command",
]


def _generated_name() -> str:
    return f"agent-{int(time.time() * 1000)}"


def build_tool_command(tool: str, params: BuildParams) -> str:
    """Render the bare tool invocation (no cd, no isolation)."""
    if is_tool_supported(tool):
        return get_tool(tool).build_command(params)

    # Unknown executables get the common --prompt/--system-prompt dialect.
    args: list[str] = []
    if params.prompt:
        args.extend(["--prompt", params.prompt])
    if params.system_prompt:
        args.extend(["--system-prompt", params.system_prompt])
    return CommandSpec(program=tool, args=tuple(args)).full_command


def _wrap_screen(command: str, screen_name: str, detached: bool) -> str:
    name = screen_name or _generated_name()
    flag = "-dmS" if detached else "-S"
    return f"screen {flag} \"{name}\" bash -c '{escape_single_quotes(command)}'"


def _wrap_docker(
    command: str,
    container_name: str,
    working_directory: str,
    detached: bool,
    image: str,
) -> str:
    name = container_name or _generated_name()
    parts = [
        "docker run",
        "-d" if detached else "-it",
        f'--name "{name}"',
        f'-v "{working_directory}:{working_directory}"',
        f'-w "{working_directory}"',
        image,
        f"bash -c '{escape_single_quotes(command)}'",
    ]
    return " ".join(parts)


def build_agent_command(
    options: AgentCommandOptions, docker_image: str = DEFAULT_DOCKER_IMAGE
) -> str:
    """Build the full, isolation-aware shell command for one agent run."""
    base = build_tool_command(options.tool, options.params)
    command = (
        f'bash -c "cd {escape_for_bash_c(shlex.quote(options.working_directory))}'
        f' && {escape_for_bash_c(base)}"'
    )

    if options.isolation == IsolationMode.SCREEN:
        command = _wrap_screen(command, options.screen_name, options.detached)
    elif options.isolation == IsolationMode.DOCKER:
        command = _wrap_docker(
            command,
            options.container_name,
            options.working_directory,
            options.detached,
            docker_image,
        )

    logger.debug("Built %s command: %s", options.tool, command)
    return command


def build_screen_stop_command(screen_name: str) -> str:
    return f'screen -S "{screen_name}" -X quit'


def build_docker_stop_command(container_name: str) -> str:
    return f'docker stop "{container_name}" && docker rm "{container_name}"'
