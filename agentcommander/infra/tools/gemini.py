"""Google Gemini CLI tool."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool, _as_int
from agentcommander.models.agent import BuildParams
from agentcommander.models.usage import TokenUsage


class GeminiTool(BaseTool):
    """Backend for the ``gemini`` CLI.

    Gemini has no system-prompt flag, so the system prompt is merged into
    the ``-p`` prompt. ``--yolo`` is on unless ``tool_options["yolo"]`` is
    False. Other ``tool_options``: ``sandbox``, ``debug``, ``checkpointing``,
    ``interactive``.
    """

    name = "gemini"
    display_name = "Gemini CLI"
    executable = "gemini"
    default_model = "gemini-2.5-flash"
    supports_resume = True
    model_map = {
        "flash": "gemini-2.5-flash",
        "2.5-flash": "gemini-2.5-flash",
        "pro": "gemini-2.5-pro",
        "2.5-pro": "gemini-2.5-pro",
        "lite": "gemini-2.5-flash-lite",
        "2.5-lite": "gemini-2.5-flash-lite",
        "3-flash": "gemini-3-flash-preview",
        "3-pro": "gemini-3-pro-preview",
        "gemini-flash": "gemini-2.5-flash",
        "gemini-pro": "gemini-2.5-pro",
    }
    session_keys = ("session_id", "conversation_id")

    def build_args(self, params: BuildParams) -> list[str]:
        args: list[str] = []

        if params.model:
            args.extend(["-m", self.map_model_to_id(params.model)])

        if params.option("yolo", True):
            args.append("--yolo")

        if params.option("sandbox"):
            args.append("--sandbox")

        if params.option("debug"):
            args.append("-d")

        if params.option("checkpointing"):
            args.append("--checkpointing")

        if params.json:
            args.extend(["--output-format", "stream-json"])

        if prompt := params.combined_prompt:
            args.extend(["-i" if params.option("interactive") else "-p", prompt])

        return args

    def extract_usage(self, output: str) -> TokenUsage:
        usage = TokenUsage()
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            block = msg.get("usage")
            if isinstance(block, dict):
                self._add_usage(usage, block)
                usage.input_tokens += _as_int(block.get("inputTokens"))
                usage.output_tokens += _as_int(block.get("outputTokens"))
                usage.total_tokens += _as_int(block.get("totalTokens"))

            meta = msg.get("usageMetadata")
            if isinstance(meta, dict):
                usage.input_tokens += _as_int(meta.get("promptTokenCount"))
                usage.output_tokens += _as_int(meta.get("candidatesTokenCount"))
                usage.total_tokens += _as_int(meta.get("totalTokenCount"))

        usage.fill_total()
        return usage
