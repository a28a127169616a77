"""Tests for the wrapped agent tools and their registry."""

import pytest

from agentcommander.infra.tools import AgentTool, get_tool, is_tool_supported, list_tools
from agentcommander.infra.tools.claude import ClaudeTool
from agentcommander.infra.tools.codex import CodexTool
from agentcommander.infra.tools.gemini import GeminiTool
from agentcommander.infra.tools.link_agent import LinkAgentTool
from agentcommander.infra.tools.opencode import OpencodeTool
from agentcommander.infra.tools.qwen import QwenTool
from agentcommander.models.agent import BuildParams
from agentcommander.models.usage import ErrorResult


class TestRegistry:
    def test_list_tools(self):
        assert list_tools() == ["claude", "codex", "opencode", "agent", "gemini", "qwen"]

    def test_get_each_tool(self):
        for name in list_tools():
            tool = get_tool(name)
            assert tool.name == name
            assert isinstance(tool, AgentTool)

    def test_get_unknown(self):
        with pytest.raises(ValueError, match="Unknown tool: nope. Available tools: claude"):
            get_tool("nope")

    def test_is_tool_supported(self):
        assert is_tool_supported("qwen")
        assert not is_tool_supported("echo")


class TestClaudeTool:
    def test_minimal_args(self):
        assert ClaudeTool().build_args(BuildParams()) == ["--dangerously-skip-permissions"]

    def test_model_aliases(self):
        args = ClaudeTool().build_args(
            BuildParams(model="opus", tool_options={"fallback_model": "sonnet"})
        )
        assert args[1:] == [
            "--model",
            "claude-opus-4-5-20251101",
            "--fallback-model",
            "claude-sonnet-4-5-20250929",
        ]

    def test_unknown_model_passes_through(self):
        assert ClaudeTool().map_model_to_id("claude-custom") == "claude-custom"

    def test_full_args(self):
        params = BuildParams(
            prompt="Hi",
            system_prompt="Sys",
            json=True,
            resume="r-1",
            tool_options={
                "append_system_prompt": "More",
                "verbose": True,
                "print": True,
                "json_input": True,
                "replay_user_messages": True,
                "session_id": "uuid-1",
                "fork_session": True,
            },
        )
        assert ClaudeTool().build_args(params) == [
            "--dangerously-skip-permissions",
            "--prompt", "Hi",
            "--system-prompt", "Sys",
            "--append-system-prompt", "More",
            "--verbose",
            "-p",
            "--output-format", "stream-json",
            "--input-format", "stream-json",
            "--replay-user-messages",
            "--session-id", "uuid-1",
            "--resume", "r-1",
            "--fork-session",
        ]

    def test_session_id_and_usage(self):
        output = (
            '{"type":"system","session_id":"abc-123"}\n'
            '{"type":"assistant","message":{"usage":{"input_tokens":10,"output_tokens":5,'
            '"cache_creation_input_tokens":2,"cache_read_input_tokens":3}}}\n'
            '{"type":"assistant","message":{"usage":{"input_tokens":1,"output_tokens":1}}}\n'
        )
        tool = ClaudeTool()
        assert tool.extract_session_id(output) == "abc-123"
        usage = tool.extract_usage(output)
        assert usage.input_tokens == 11
        assert usage.output_tokens == 6
        assert usage.cache_creation_tokens == 2
        assert usage.cache_read_tokens == 3

    def test_no_session_id(self):
        assert ClaudeTool().extract_session_id("plain text\n") is None


class TestCodexTool:
    def test_prompt_is_piped(self):
        command = CodexTool().build_command(
            BuildParams(prompt="Do it", system_prompt="Be careful", model="gpt5", json=True)
        )
        assert command == (
            "printf '%s' 'Be careful\n\nDo it' | codex exec --model gpt-5 --json "
            "--skip-git-repo-check --dangerously-bypass-approvals-and-sandbox"
        )

    def test_resume(self):
        args = CodexTool().build_args(BuildParams(resume="t-9"))
        assert args[:3] == ["exec", "resume", "t-9"]

    def test_thread_id_preferred(self):
        output = '{"type":"thread.started","thread_id":"t-1","session_id":"s-1"}\n'
        assert CodexTool().extract_session_id(output) == "t-1"

    def test_usage(self):
        output = '{"type":"turn.completed","usage":{"input_tokens":7,"output_tokens":3}}\n'
        usage = CodexTool().extract_usage(output)
        assert (usage.input_tokens, usage.output_tokens) == (7, 3)


class TestOpencodeTool:
    def test_args(self):
        args = OpencodeTool().build_args(BuildParams(model="grok", json=True, resume="s"))
        assert args == ["run", "--model", "opencode/grok-code", "--format", "json", "--resume", "s"]

    def test_command_pipes_prompt(self):
        command = OpencodeTool().build_command(BuildParams(prompt="hello"))
        assert command == "printf '%s' 'hello' | opencode run"


class TestLinkAgentTool:
    def test_args(self):
        args = LinkAgentTool().build_args(
            BuildParams(
                model="grok",
                tool_options={"compact_json": True, "use_existing_claude_oauth": True},
            )
        )
        assert args == [
            "--model",
            "opencode/grok-code",
            "--compact-json",
            "--use-existing-claude-oauth",
        ]

    def test_usage_from_step_finish(self):
        output = (
            '{"type":"step_start"}\n'
            '{"type":"step_finish","part":{"tokens":{"input":10,"output":4,"reasoning":2,'
            '"cache":{"read":5,"write":1}},"cost":0.01}}\n'
            '{"type":"step_finish","part":{"tokens":{"input":3,"output":1},"cost":0.02}}\n'
        )
        usage = LinkAgentTool().extract_usage(output)
        assert usage.step_count == 2
        assert usage.input_tokens == 13
        assert usage.output_tokens == 5
        assert usage.reasoning_tokens == 2
        assert usage.cache_read_tokens == 5
        assert usage.cache_write_tokens == 1
        assert usage.total_cost == pytest.approx(0.03)

    def test_step_error(self):
        result = LinkAgentTool().detect_errors('{"type":"step_error","message":"rate limited"}\n')
        assert result == ErrorResult(has_error=True, error_type="step_error", message="rate limited")


class TestGeminiTool:
    def test_args(self):
        args = GeminiTool().build_args(
            BuildParams(prompt="Go", system_prompt="Sys", model="pro", json=True)
        )
        assert args == [
            "-m", "gemini-2.5-pro",
            "--yolo",
            "--output-format", "stream-json",
            "-p", "Sys\n\nGo",
        ]

    def test_yolo_opt_out_and_flags(self):
        args = GeminiTool().build_args(
            BuildParams(
                prompt="Go",
                tool_options={
                    "yolo": False,
                    "sandbox": True,
                    "debug": True,
                    "checkpointing": True,
                    "interactive": True,
                },
            )
        )
        assert args == ["--sandbox", "-d", "--checkpointing", "-i", "Go"]

    def test_usage_metadata_and_total(self):
        output = (
            '{"usageMetadata":{"promptTokenCount":8,"candidatesTokenCount":2}}\n'
            '{"usage":{"inputTokens":1,"outputTokens":1}}\n'
        )
        usage = GeminiTool().extract_usage(output)
        assert usage.input_tokens == 9
        assert usage.output_tokens == 3
        assert usage.total_tokens == 12

    def test_conversation_id(self):
        assert GeminiTool().extract_session_id('{"conversation_id":"c-1"}\n') == "c-1"


class TestQwenTool:
    def test_default_args(self):
        args = QwenTool().build_args(BuildParams(prompt="Hi"))
        assert args == ["-p", "Hi", "--output-format", "stream-json", "--yolo"]

    def test_plain_json_and_options(self):
        args = QwenTool().build_args(
            BuildParams(
                json=True,
                tool_options={
                    "stream_json": False,
                    "yolo": False,
                    "continue_session": True,
                    "all_files": True,
                    "include_directories": ["src", "docs"],
                },
            )
        )
        assert args == [
            "--output-format", "json",
            "--continue",
            "--all-files",
            "--include-directories", "src",
            "--include-directories", "docs",
        ]

    def test_resume_beats_continue(self):
        args = QwenTool().build_args(
            BuildParams(resume="q-1", tool_options={"continue_session": True})
        )
        assert "--resume" in args
        assert "--continue" not in args

    def test_session_and_usage(self):
        output = (
            '{"type":"system","sessionId":"q-1"}\n'
            '{"type":"result","result":{"usage":{"input_tokens":4,"output_tokens":6}}}\n'
        )
        tool = QwenTool()
        assert tool.extract_session_id(output) == "q-1"
        usage = tool.extract_usage(output)
        assert usage.total_tokens == 10


class TestDetectErrors:
    def test_error_type(self):
        result = ClaudeTool().detect_errors('{"type":"error","message":"boom"}\n')
        assert result == ErrorResult(has_error=True, error_type="error", message="boom")

    def test_error_field(self):
        result = CodexTool().detect_errors('{"type":"result","error":"bad input"}\n')
        assert result == ErrorResult(has_error=True, error_type="result", message="bad input")

    def test_unknown_message(self):
        result = OpencodeTool().detect_errors('{"type":"error","error":{"code":1}}\n')
        assert result.has_error
        assert result.message == "Unknown error"

    def test_no_error(self):
        assert not QwenTool().detect_errors('{"type":"result"}\nplain\n').has_error

    def test_falls_through_to_error_string(self):
        result = GeminiTool().detect_errors('{"type":"error","message":42,"error":"boom"}\n')
        assert result == ErrorResult(has_error=True, error_type="error", message="boom")

    @pytest.mark.parametrize("value", ["null", '""'])
    def test_error_key_present_is_flagged(self, value):
        result = QwenTool().detect_errors(f'{{"type":"result","error":{value}}}\n')
        assert result.has_error
        assert result.message == "Unknown error"

    def test_step_error_uses_error_string(self):
        result = LinkAgentTool().detect_errors('{"type":"step_error","error":"quota"}\n')
        assert result == ErrorResult(has_error=True, error_type="step_error", message="quota")


class TestDescribe:
    def test_describe(self):
        info = get_tool("claude").describe()
        assert info["display_name"] == "Claude Code CLI"
        assert info["supports_resume"] is True
        assert info["models"]["opus"] == "claude-opus-4-5-20251101"
