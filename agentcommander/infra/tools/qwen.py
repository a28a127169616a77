"""Qwen Code CLI tool."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool
from agentcommander.models.agent import BuildParams
from agentcommander.models.usage import TokenUsage


class QwenTool(BaseTool):
    """Backend for the ``qwen`` CLI.

    Streams ``stream-json`` and auto-approves (``--yolo``) by default; set
    ``tool_options["stream_json"]`` or ``["yolo"]`` to False to opt out.
    Other ``tool_options``: ``include_partial_messages``,
    ``continue_session``, ``all_files``, ``include_directories``.
    """

    name = "qwen"
    display_name = "Qwen Code CLI"
    executable = "qwen"
    default_model = "qwen3-coder-480a35"
    supports_json_input = True
    supports_resume = True
    model_map = {
        "qwen3-coder": "qwen3-coder-480a35",
        "qwen3-coder-480a35": "qwen3-coder-480a35",
        "qwen3-coder-30ba3": "qwen3-coder-30ba3",
        "coder": "qwen3-coder-480a35",
        "gpt-4o": "gpt-4o",
        "gpt-4": "gpt-4",
        "sonnet": "claude-sonnet-4",
        "opus": "claude-opus-4",
    }
    session_keys = ("session_id", "sessionId")

    def build_args(self, params: BuildParams) -> list[str]:
        args: list[str] = []

        # A prompt switches qwen into headless mode.
        if prompt := params.combined_prompt:
            args.extend(["-p", prompt])

        if params.model:
            args.extend(["--model", self.map_model_to_id(params.model)])

        stream_json = params.option("stream_json", True)
        if stream_json:
            args.extend(["--output-format", "stream-json"])
        elif params.json:
            args.extend(["--output-format", "json"])

        if stream_json and params.option("include_partial_messages"):
            args.append("--include-partial-messages")

        if params.option("yolo", True):
            args.append("--yolo")

        if params.resume:
            args.extend(["--resume", params.resume])
        elif params.option("continue_session"):
            args.append("--continue")

        if params.option("all_files"):
            args.append("--all-files")

        for directory in params.option("include_directories", ()):
            args.extend(["--include-directories", directory])

        return args

    def extract_usage(self, output: str) -> TokenUsage:
        usage = TokenUsage()
        for msg in self.parse_output(output):
            if not isinstance(msg, dict):
                continue
            self._add_usage(usage, msg.get("usage"))
            result = msg.get("result")
            if isinstance(result, dict):
                self._add_usage(usage, result.get("usage"))
        usage.fill_total()
        return usage
