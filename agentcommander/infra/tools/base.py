"""Agent tool protocol and shared behaviour for NDJSON-emitting CLIs."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from agentcommander.infra.shell import build_piped_command
from agentcommander.infra.streaming.ndjson import parse_ndjson
from agentcommander.models.agent import BuildParams, CommandSpec
from agentcommander.models.usage import ErrorResult, TokenUsage


@runtime_checkable
class AgentTool(Protocol):
    """Protocol for wrapped agent CLIs.

    Each tool knows its own flag dialect and how to recover session ids,
    token usage and errors from the output it prints.
    """

    name: str
    display_name: str
    executable: str
    default_model: str

    def build_args(self, params: BuildParams) -> list[str]:
        """Translate generic build parameters into this tool's argv."""
        ...

    def build_command(self, params: BuildParams) -> str:
        """Render the tool invocation as a single shell command string."""
        ...

    def parse_output(self, output: str) -> list[Any]:
        """Parse structured messages out of raw output."""
        ...

    def extract_session_id(self, output: str) -> str | None:
        """Find the id needed to resume this conversation later."""
        ...

    def extract_usage(self, output: str) -> TokenUsage:
        """Sum token counters reported in the output."""
        ...

    def detect_errors(self, output: str) -> ErrorResult:
        """Report the first error message in the output."""
        ...


def error_message(msg: dict[str, Any]) -> str:
    """First non-empty string among ``message`` and ``error``."""
    for key in ("message", "error"):
        value = msg.get(key)
        if isinstance(value, str) and value:
            return value
    return "Unknown error"


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


class BaseTool:
    """Defaults shared by the concrete tools.

    Subclasses set the class attributes and implement ``build_args``;
    tools that read their prompt from stdin override ``command_spec``.
    """

    name = ""
    display_name = ""
    executable = ""
    default_model = ""
    supports_json_output = True
    supports_json_input = False
    supports_system_prompt = False
    supports_resume = False
    model_map: dict[str, str] = {}
    session_keys: tuple[str, ...] = ("session_id",)

    def map_model_to_id(self, model: str) -> str:
        """Resolve a short alias (e.g. ``opus``) to the full model id."""
        return self.model_map.get(model, model)

    def build_args(self, params: BuildParams) -> list[str]:
        raise NotImplementedError

    def command_spec(self, params: BuildParams) -> CommandSpec:
        return CommandSpec(program=self.executable, args=tuple(self.build_args(params)))

    def build_command(self, params: BuildParams) -> str:
        spec = self.command_spec(params)
        if spec.stdin is not None:
            return build_piped_command(spec.stdin, spec.full_command)
        return spec.full_command

    def parse_output(self, output: str) -> list[Any]:
        return parse_ndjson(output)

    def extract_session_id(self, output: str) -> str | None:
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            for key in self.session_keys:
                value = msg.get(key)
                if isinstance(value, str) and value:
                    return value
        return None

    def extract_usage(self, output: str) -> TokenUsage:
        usage = TokenUsage()
        for msg in self.parse_output(output):
            if isinstance(msg, dict):
                self._add_usage(usage, msg.get("usage"))
        return usage

    @staticmethod
    def _add_usage(usage: TokenUsage, block: Any) -> None:
        """Add the snake_case token counters of one usage block."""
        if not isinstance(block, dict):
            return
        usage.input_tokens += _as_int(block.get("input_tokens"))
        usage.output_tokens += _as_int(block.get("output_tokens"))
        usage.total_tokens += _as_int(block.get("total_tokens"))

    def detect_errors(self, output: str) -> ErrorResult:
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            if msg.get("type") == "error" or "error" in msg:
                return ErrorResult(
                    has_error=True,
                    error_type=msg.get("type") or "error",
                    message=error_message(msg),
                )
        return ErrorResult()

    def describe(self) -> dict[str, Any]:
        """Static capability summary, used by ``tools show``."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "executable": self.executable,
            "default_model": self.default_model,
            "supports_json_output": self.supports_json_output,
            "supports_json_input": self.supports_json_input,
            "supports_system_prompt": self.supports_system_prompt,
            "supports_resume": self.supports_resume,
            "models": dict(self.model_map),
        }
