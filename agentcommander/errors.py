"""Exception types raised by the agent controller and its collaborators."""

from __future__ import annotations


class AgentCommanderError(Exception):
    """Base class for all agentcommander errors."""


class ConfigurationError(AgentCommanderError, ValueError):
    """Invalid or incomplete agent configuration.

    Raised before any process is spawned.
    """


class UsageError(AgentCommanderError, RuntimeError):
    """An operation was called out of order (e.g. stop before start)."""
