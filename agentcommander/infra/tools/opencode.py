"""OpenCode CLI tool."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool
from agentcommander.models.agent import BuildParams, CommandSpec


class OpencodeTool(BaseTool):
    """Backend for the ``opencode`` CLI.

    Generates commands like:
        printf '%s' '...' | opencode run --model opencode/grok-code --format json
    """

    name = "opencode"
    display_name = "OpenCode CLI"
    executable = "opencode"
    default_model = "grok-code-fast-1"
    supports_json_input = True
    supports_resume = True
    model_map = {
        "gpt4": "openai/gpt-4",
        "gpt4o": "openai/gpt-4o",
        "claude": "anthropic/claude-3-5-sonnet",
        "sonnet": "anthropic/claude-3-5-sonnet",
        "opus": "anthropic/claude-3-opus",
        "gemini": "google/gemini-pro",
        "grok": "opencode/grok-code",
        "grok-code": "opencode/grok-code",
        "grok-code-fast-1": "opencode/grok-code",
    }

    def build_args(self, params: BuildParams) -> list[str]:
        args = ["run"]

        if params.model:
            args.extend(["--model", self.map_model_to_id(params.model)])

        if params.json:
            args.extend(["--format", "json"])

        if params.resume:
            args.extend(["--resume", params.resume])

        return args

    def command_spec(self, params: BuildParams) -> CommandSpec:
        return CommandSpec(
            program=self.executable,
            args=tuple(self.build_args(params)),
            stdin=params.combined_prompt,
        )
