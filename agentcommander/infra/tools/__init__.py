"""Wrapped agent CLIs, one class per tool, looked up by name.

Each tool implements the ``AgentTool`` protocol: it builds its own command
line and recovers session ids, token usage and errors from its output.
"""

from __future__ import annotations

from agentcommander.infra.tools.base import AgentTool, BaseTool
from agentcommander.infra.tools.registry import get_tool, is_tool_supported, list_tools

__all__ = ["AgentTool", "BaseTool", "get_tool", "is_tool_supported", "list_tools"]
