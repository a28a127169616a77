"""Builder for NDJSON messages sent to an agent's stdin."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from agentcommander.infra.streaming.ndjson import stringify_ndjson_line


class JsonInputStream:
    """Accumulates outbound messages and renders them as NDJSON.

    Mutating methods return ``self`` so calls can be chained::

        JsonInputStream().add_system_message("Be terse").add_prompt("Hi")
    """

    def __init__(self, compact: bool = True) -> None:
        self.compact = compact
        self._messages: list[Any] = []

    @classmethod
    def from_messages(cls, messages: Iterable[Any], compact: bool = True) -> JsonInputStream:
        stream = cls(compact=compact)
        for message in messages:
            stream.add(message)
        return stream

    @property
    def messages(self) -> list[Any]:
        return self._messages

    def add(self, message: Any) -> JsonInputStream:
        """Append a message; None is ignored."""
        if message is not None:
            self._messages.append(message)
        return self

    def add_prompt(self, content: str) -> JsonInputStream:
        return self.add({"type": "user_prompt", "content": content})

    def add_system_message(self, content: str) -> JsonInputStream:
        return self.add({"type": "system", "content": content})

    def add_config(self, config: Mapping[str, Any]) -> JsonInputStream:
        """Append a ``{"type": "config", ...}`` message merged with ``config``."""
        return self.add({"type": "config", **config})

    def clear(self) -> JsonInputStream:
        self._messages.clear()
        return self

    def size(self) -> int:
        return len(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def to_string(self) -> str:
        return "".join(stringify_ndjson_line(m, self.compact) for m in self._messages)

    def to_bytes(self) -> bytes:
        return self.to_string().encode()

    def __str__(self) -> str:
        return self.to_string()
