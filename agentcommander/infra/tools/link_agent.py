"""@link-assistant/agent CLI tool (an unrestricted OpenCode fork)."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool, _as_int, error_message
from agentcommander.models.agent import BuildParams, CommandSpec
from agentcommander.models.usage import ErrorResult, TokenUsage


class LinkAgentTool(BaseTool):
    """Backend for the ``agent`` CLI.

    The prompt is piped on stdin. Token usage is reported per step in
    ``step_finish`` events rather than in a ``usage`` block.
    """

    name = "agent"
    display_name = "@link-assistant/agent"
    executable = "agent"
    default_model = "grok-code-fast-1"
    supports_json_input = True
    model_map = {
        "grok": "opencode/grok-code",
        "grok-code": "opencode/grok-code",
        "grok-code-fast-1": "opencode/grok-code",
        "big-pickle": "opencode/big-pickle",
        "gpt-5-nano": "openai/gpt-5-nano",
        "sonnet": "anthropic/claude-3-5-sonnet",
        "haiku": "anthropic/claude-3-5-haiku",
        "opus": "anthropic/claude-3-opus",
        "gemini-3-pro": "google/gemini-3-pro",
    }

    def build_args(self, params: BuildParams) -> list[str]:
        args: list[str] = []

        if params.model:
            args.extend(["--model", self.map_model_to_id(params.model)])

        if params.option("compact_json"):
            args.append("--compact-json")

        if params.option("use_existing_claude_oauth"):
            args.append("--use-existing-claude-oauth")

        return args

    def command_spec(self, params: BuildParams) -> CommandSpec:
        return CommandSpec(
            program=self.executable,
            args=tuple(self.build_args(params)),
            stdin=params.combined_prompt,
        )

    def extract_usage(self, output: str) -> TokenUsage:
        usage = TokenUsage()
        for msg in self.parse_output(output):
            if not isinstance(msg, dict) or msg.get("type") != "step_finish":
                continue
            part = msg.get("part")
            if not isinstance(part, dict):
                continue
            usage.step_count += 1

            tokens = part.get("tokens")
            if isinstance(tokens, dict):
                usage.input_tokens += _as_int(tokens.get("input"))
                usage.output_tokens += _as_int(tokens.get("output"))
                usage.reasoning_tokens += _as_int(tokens.get("reasoning"))
                cache = tokens.get("cache")
                if isinstance(cache, dict):
                    usage.cache_read_tokens += _as_int(cache.get("read"))
                    usage.cache_write_tokens += _as_int(cache.get("write"))

            cost = part.get("cost")
            if isinstance(cost, (int, float)) and not isinstance(cost, bool):
                usage.total_cost += cost
        return usage

    def detect_errors(self, output: str) -> ErrorResult:
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            msg_type = msg.get("type")
            if msg_type in ("error", "step_error"):
                return ErrorResult(
                    has_error=True,
                    error_type=msg_type,
                    message=error_message(msg),
                )
        return ErrorResult()
