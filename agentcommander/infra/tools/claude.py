"""Claude Code CLI tool."""

from __future__ import annotations

from typing import Any

from agentcommander.infra.tools.base import BaseTool, _as_int
from agentcommander.models.agent import BuildParams
from agentcommander.models.usage import TokenUsage


class ClaudeTool(BaseTool):
    """Anthropic's ``claude`` CLI.

    Generates commands like:
        claude --dangerously-skip-permissions --model claude-opus-4-5-20251101
            --prompt "..." --output-format stream-json

    Recognised ``tool_options``: ``append_system_prompt``, ``fallback_model``,
    ``print``, ``verbose``, ``json_input``, ``replay_user_messages``,
    ``session_id``, ``fork_session``.
    """

    name = "claude"
    display_name = "Claude Code CLI"
    executable = "claude"
    default_model = "sonnet"
    supports_json_input = True
    supports_system_prompt = True
    supports_resume = True
    model_map = {
        "sonnet": "claude-sonnet-4-5-20250929",
        "opus": "claude-opus-4-5-20251101",
        "haiku": "claude-haiku-4-5-20251001",
        "haiku-3-5": "claude-3-5-haiku-20241022",
        "haiku-3": "claude-3-haiku-20240307",
    }

    def build_args(self, params: BuildParams) -> list[str]:
        # Permission prompts would block a non-interactive run.
        args = ["--dangerously-skip-permissions"]

        if params.model:
            args.extend(["--model", self.map_model_to_id(params.model)])

        if fallback := params.option("fallback_model"):
            args.extend(["--fallback-model", self.map_model_to_id(fallback)])

        if params.prompt:
            args.extend(["--prompt", params.prompt])

        if params.system_prompt:
            args.extend(["--system-prompt", params.system_prompt])

        if append := params.option("append_system_prompt"):
            args.extend(["--append-system-prompt", append])

        if params.option("verbose"):
            args.append("--verbose")

        if params.option("print"):
            args.append("-p")

        if params.json:
            args.extend(["--output-format", "stream-json"])

        if params.option("json_input"):
            args.extend(["--input-format", "stream-json"])

        if params.option("replay_user_messages"):
            args.append("--replay-user-messages")

        if session_id := params.option("session_id"):
            args.extend(["--session-id", session_id])

        if params.resume:
            args.extend(["--resume", params.resume])

        if params.option("fork_session"):
            args.append("--fork-session")

        return args

    def extract_usage(self, output: str) -> TokenUsage:
        """Sum ``message.usage`` blocks of assistant messages."""
        usage = TokenUsage()
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            message: Any = msg.get("message")
            block = message.get("usage") if isinstance(message, dict) else None
            if not isinstance(block, dict):
                continue
            usage.input_tokens += _as_int(block.get("input_tokens"))
            usage.output_tokens += _as_int(block.get("output_tokens"))
            usage.cache_creation_tokens += _as_int(block.get("cache_creation_input_tokens"))
            usage.cache_read_tokens += _as_int(block.get("cache_read_input_tokens"))
        return usage
