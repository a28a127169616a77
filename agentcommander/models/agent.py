"""Agent controller domain models."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from agentcommander.errors import ConfigurationError

if TYPE_CHECKING:
    from agentcommander.infra.streaming.output_stream import OutputStreamListener
    from agentcommander.models.usage import ErrorResult, TokenUsage


class IsolationMode(str, Enum):
    NONE = "none"
    SCREEN = "screen"
    DOCKER = "docker"

    @property
    def target_field(self) -> str:
        """Name of the AgentOptions field that names the isolation target."""
        if self is IsolationMode.SCREEN:
            return "screen_name"
        if self is IsolationMode.DOCKER:
            return "container_name"
        return ""


class ControllerState(str, Enum):
    CONSTRUCTED = "constructed"
    STARTED = "started"
    STOPPED = "stopped"


@dataclass(frozen=True)
class CommandSpec:
    """Program, argv and optional stdin text for launching an agent executable."""

    program: str
    args: tuple[str, ...] = ()
    stdin: str | None = None

    @property
    def full_command(self) -> str:
        """Return the argv joined for shell execution (stdin piping excluded)."""
        parts = [self.program, *self.args]
        return " ".join(shlex.quote(p) for p in parts)


@dataclass(frozen=True)
class BuildParams:
    """Parameters handed to a tool when building its command line.

    ``tool_options`` carries tool-specific extras (e.g. ``fallback_model``
    for claude, ``sandbox`` for gemini).
    """

    prompt: str = ""
    system_prompt: str = ""
    model: str = ""
    json: bool = False
    resume: str = ""
    tool_options: dict[str, Any] = field(default_factory=dict)

    def option(self, key: str, default: Any = None) -> Any:
        return self.tool_options.get(key, default)

    @property
    def combined_prompt(self) -> str:
        """System prompt and user prompt joined by a blank line."""
        if self.system_prompt and self.prompt:
            return f"{self.system_prompt}\n\n{self.prompt}"
        return self.system_prompt or self.prompt


@dataclass(frozen=True)
class AgentOptions:
    """Configuration for one agent controller. Immutable once handed over."""

    tool: str
    working_directory: str
    prompt: str = ""
    system_prompt: str = ""
    model: str = ""
    isolation: str = IsolationMode.NONE.value
    screen_name: str = ""
    container_name: str = ""
    json: bool = False
    resume: str = ""
    tool_options: dict[str, Any] = field(default_factory=dict)

    @property
    def isolation_target(self) -> str:
        """Screen session or container name for the current isolation mode."""
        if self.isolation == IsolationMode.SCREEN:
            return self.screen_name
        if self.isolation == IsolationMode.DOCKER:
            return self.container_name
        return ""

    def validate(self) -> None:
        """Raise ConfigurationError if a required field is missing."""
        if not self.tool:
            raise ConfigurationError("tool is required")
        if not self.working_directory:
            raise ConfigurationError("working_directory is required")
        for mode in (IsolationMode.SCREEN, IsolationMode.DOCKER):
            if self.isolation == mode and not self.isolation_target:
                raise ConfigurationError(
                    f"{mode.target_field} is required for {mode.value} isolation"
                )

    def build_params(self) -> BuildParams:
        return BuildParams(
            prompt=self.prompt,
            system_prompt=self.system_prompt,
            model=self.model,
            json=self.json,
            resume=self.resume,
            tool_options=dict(self.tool_options),
        )


@dataclass(frozen=True)
class AgentCommandOptions:
    """Everything the command builder needs to render one shell command."""

    tool: str
    working_directory: str
    params: BuildParams = field(default_factory=BuildParams)
    isolation: str = IsolationMode.NONE.value
    screen_name: str = ""
    container_name: str = ""
    detached: bool = False

    @classmethod
    def from_agent_options(
        cls, options: AgentOptions, detached: bool = False
    ) -> AgentCommandOptions:
        return cls(
            tool=options.tool,
            working_directory=options.working_directory,
            params=options.build_params(),
            isolation=options.isolation,
            screen_name=options.screen_name,
            container_name=options.container_name,
            detached=detached,
        )


@dataclass(frozen=True)
class AgentStartOptions:
    """Options for Agent.start()."""

    dry_run: bool = False
    detached: bool = False
    attached: bool = False
    listener: OutputStreamListener | None = None
    on_output: Callable[[str, str], None] | None = None


@dataclass(frozen=True)
class AgentStopOptions:
    """Options for Agent.stop()."""

    dry_run: bool = False


@dataclass(frozen=True)
class AgentResult:
    """Outcome of one agent run, produced by Agent.stop()."""

    exit_code: int = 0
    plain_output: str = ""
    parsed_output: tuple[Any, ...] | None = None
    session_id: str | None = None
    usage: TokenUsage | None = None
    error: ErrorResult | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not (self.error and self.error.has_error)
