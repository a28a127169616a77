"""Agent controller: start an agent CLI, then stop it and collect its output."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import click

from agentcommander.config import AppConfig
from agentcommander.errors import ConfigurationError, UsageError
from agentcommander.infra.command_builder import (
    build_agent_command,
    build_docker_stop_command,
    build_screen_stop_command,
)
from agentcommander.infra.executor import (
    ProcessHandle,
    execute_command,
    execute_detached,
    setup_signal_handler,
    start_command,
)
from agentcommander.infra.streaming import JsonInputStream, JsonOutputStream
from agentcommander.infra.tools import BaseTool, get_tool, is_tool_supported
from agentcommander.models.agent import (
    AgentCommandOptions,
    AgentOptions,
    AgentResult,
    AgentStartOptions,
    AgentStopOptions,
    ControllerState,
    IsolationMode,
)

logger = logging.getLogger(__name__)


class Agent:
    """Controls one agent run.

    Construction validates the options and never spawns anything. ``start``
    dispatches the command; ``stop`` either sends the isolation stop command
    or waits for the isolation-free child and collects its output. Each
    successful isolation-free ``stop`` consumes the process handle, so a
    second call raises UsageError until the agent is started again.
    """

    def __init__(self, options: AgentOptions, config: AppConfig | None = None) -> None:
        options.validate()
        self._options = options
        self._config = config or AppConfig()
        self._handle: ProcessHandle | None = None
        self._output_stream: JsonOutputStream | None = None
        self._session_id: str | None = None
        self._state = ControllerState.CONSTRUCTED
        self._remove_signal_handler: Callable[[], None] | None = None

    @property
    def options(self) -> AgentOptions:
        return self._options

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def session_id(self) -> str | None:
        """Session id recovered by the last isolation-free stop, if any."""
        return self._session_id

    @property
    def messages(self) -> Sequence[Any]:
        """Structured messages parsed so far (empty without an output stream)."""
        if self._output_stream is None:
            return ()
        return self._output_stream.messages

    @property
    def tool(self) -> BaseTool | None:
        """Capability object for the configured tool, None for unknown tools."""
        if is_tool_supported(self._options.tool):
            return get_tool(self._options.tool)
        return None

    def input_stream(self) -> JsonInputStream:
        """Empty NDJSON input builder using the configured formatting."""
        return JsonInputStream(compact=self._config.streaming.compact_input)

    def _command_options(self, detached: bool) -> AgentCommandOptions:
        return AgentCommandOptions.from_agent_options(self._options, detached=detached)

    def _stdout_sink(self, start_options: AgentStartOptions) -> Callable[[str], None] | None:
        stream = self._output_stream
        on_output = start_options.on_output
        if stream is None and on_output is None:
            return None

        def sink(line: str) -> None:
            if stream is not None:
                stream.process(line + "\n")
            if on_output is not None:
                on_output("stdout", line)

        return sink

    async def start(self, start_options: AgentStartOptions | None = None) -> None:
        """Build the agent command and dispatch it.

        A dry run only prints the command. A detached run spawns and forgets.
        Otherwise the child keeps running and ``stop`` collects it.
        """
        start_options = start_options or AgentStartOptions()
        if self._handle is not None:
            raise UsageError("Agent already started")

        if self._options.json or start_options.listener is not None:
            listeners = [start_options.listener] if start_options.listener else []
            self._output_stream = JsonOutputStream(listeners)

        command = build_agent_command(
            self._command_options(start_options.detached),
            docker_image=self._config.docker.image,
        )
        shell = self._config.general.shell

        if start_options.dry_run:
            await execute_command(command, dry_run=True, shell=shell)
            self._state = ControllerState.STARTED
            return

        if start_options.detached:
            pid = await execute_detached(command, shell=shell)
            logger.info("Started %s detached (pid %s)", self._options.tool, pid)
            click.echo("Agent started in detached mode")
            if self._options.isolation == IsolationMode.SCREEN:
                click.echo(f"Screen session: {self._options.screen_name}")
            elif self._options.isolation == IsolationMode.DOCKER:
                click.echo(f"Container: {self._options.container_name}")
            self._state = ControllerState.STARTED
            return

        on_output = start_options.on_output
        self._handle = await start_command(
            command,
            attached=start_options.attached,
            on_stdout=self._stdout_sink(start_options),
            on_stderr=(lambda line: on_output("stderr", line)) if on_output else None,
            shell=shell,
            read_chunk=self._config.streaming.read_chunk_bytes,
        )
        logger.info("Started %s (pid %s)", self._options.tool, self._handle.pid)

        if start_options.attached and self._is_isolation_free():
            self._remove_signal_handler = setup_signal_handler(self._handle.terminate)
        self._state = ControllerState.STARTED

    def _is_isolation_free(self) -> bool:
        return self._options.isolation in (IsolationMode.NONE, "")

    async def wait(self) -> int | None:
        """Wait for the live child to exit without consuming it.

        Returns None when there is no live handle (dry run, detached, or
        already stopped).
        """
        if self._handle is None:
            return None
        return await self._handle.wait_for_exit()

    async def stop(self, stop_options: AgentStopOptions | None = None) -> AgentResult:
        """Stop the agent and return what it produced."""
        stop_options = stop_options or AgentStopOptions()
        isolation = self._options.isolation

        if isolation in (IsolationMode.SCREEN, IsolationMode.DOCKER):
            return await self._stop_isolated(stop_options)
        if self._is_isolation_free():
            return await self._collect()
        raise ConfigurationError(f"Unsupported isolation mode: {isolation}")

    async def _stop_isolated(self, stop_options: AgentStopOptions) -> AgentResult:
        if self._options.isolation == IsolationMode.SCREEN:
            command = build_screen_stop_command(self._options.screen_name)
        else:
            command = build_docker_stop_command(self._options.container_name)

        result = await execute_command(
            command,
            dry_run=stop_options.dry_run,
            attached=True,
            shell=self._config.general.shell,
        )
        if self._handle is not None and not stop_options.dry_run:
            # The attached wrapper exits once its session is gone.
            if result.exit_code != 0:
                self._handle.terminate()
            await self._handle.wait_for_exit()
            self._handle = None
        self._state = ControllerState.STOPPED
        logger.info("Stopped %s %s", self._options.isolation, self._options.isolation_target)
        return AgentResult(exit_code=result.exit_code, plain_output=result.stdout)

    async def _collect(self) -> AgentResult:
        handle = self._handle
        if handle is None:
            raise UsageError("Agent not started or already stopped")

        # The handle stays owned until the wait completes so a cancelled
        # stop can be retried.
        exit_code = await handle.wait_for_exit()
        self._handle = None
        if self._remove_signal_handler is not None:
            self._remove_signal_handler()
            self._remove_signal_handler = None

        stdout, stderr, _ = handle.get_output()
        plain_output = f"{stdout}\n{stderr}" if stderr else stdout

        parsed_output = None
        if self._output_stream is not None:
            self._output_stream.flush()
            if self._output_stream.messages:
                parsed_output = tuple(self._output_stream.messages)

        usage = error = None
        tool = self.tool
        if tool is not None:
            self._session_id = tool.extract_session_id(plain_output)
            usage = tool.extract_usage(plain_output)
            error = tool.detect_errors(plain_output)

        self._state = ControllerState.STOPPED
        logger.info("Stopped %s with exit code %d", self._options.tool, exit_code)
        return AgentResult(
            exit_code=exit_code,
            plain_output=plain_output,
            parsed_output=parsed_output,
            session_id=self._session_id,
            usage=usage,
            error=error,
        )


def agent(options: AgentOptions, config: AppConfig | None = None) -> Agent:
    """Create a validated agent controller."""
    return Agent(options, config)
