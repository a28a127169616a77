"""Agent tool factory/registry."""

from __future__ import annotations

from agentcommander.infra.tools.base import BaseTool
from agentcommander.infra.tools.claude import ClaudeTool
from agentcommander.infra.tools.codex import CodexTool
from agentcommander.infra.tools.gemini import GeminiTool
from agentcommander.infra.tools.link_agent import LinkAgentTool
from agentcommander.infra.tools.opencode import OpencodeTool
from agentcommander.infra.tools.qwen import QwenTool

_TOOLS: dict[str, type[BaseTool]] = {
    ClaudeTool.name: ClaudeTool,
    CodexTool.name: CodexTool,
    OpencodeTool.name: OpencodeTool,
    LinkAgentTool.name: LinkAgentTool,
    GeminiTool.name: GeminiTool,
    QwenTool.name: QwenTool,
}


def get_tool(tool_name: str) -> BaseTool:
    """Get a tool instance by name."""
    cls = _TOOLS.get(tool_name)
    if cls is None:
        raise ValueError(
            f"Unknown tool: {tool_name}. Available tools: {', '.join(_TOOLS)}"
        )
    return cls()


def list_tools() -> list[str]:
    return list(_TOOLS)


def is_tool_supported(tool_name: str) -> bool:
    return tool_name in _TOOLS
