"""OpenAI Codex CLI tool."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool
from agentcommander.models.agent import BuildParams, CommandSpec


class CodexTool(BaseTool):
    """OpenAI's ``codex`` CLI, run non-interactively via ``codex exec``.

    The prompt is piped on stdin; a system prompt is prepended to it:
        printf '%s' '...' | codex exec --json --skip-git-repo-check ...
    """

    name = "codex"
    display_name = "Codex CLI"
    executable = "codex"
    default_model = "gpt-5"
    supports_json_input = True
    supports_resume = True
    model_map = {
        "gpt5": "gpt-5",
        "gpt5-codex": "gpt-5-codex",
        "o3": "o3",
        "o3-mini": "o3-mini",
        "gpt4": "gpt-4",
        "gpt4o": "gpt-4o",
        "claude": "claude-3-5-sonnet",
        "sonnet": "claude-3-5-sonnet",
        "opus": "claude-3-opus",
    }
    session_keys = ("thread_id", "session_id")

    def build_args(self, params: BuildParams) -> list[str]:
        args = ["exec"]

        if params.resume:
            args.extend(["resume", params.resume])

        if params.model:
            args.extend(["--model", self.map_model_to_id(params.model)])

        if params.json:
            args.append("--json")

        args.extend(["--skip-git-repo-check", "--dangerously-bypass-approvals-and-sandbox"])
        return args

    def command_spec(self, params: BuildParams) -> CommandSpec:
        return CommandSpec(
            program=self.executable,
            args=tuple(self.build_args(params)),
            stdin=params.combined_prompt,
        )
