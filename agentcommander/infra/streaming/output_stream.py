"""Incremental NDJSON decoder for chunked process output."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from agentcommander.infra.streaming.ndjson import parse_ndjson_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseError:
    """A line that looked like a JSON object but failed to parse."""

    line: str
    line_number: int


class OutputStreamListener:
    """Side-effect hooks invoked by JsonOutputStream.

    Subclass and override the hooks you need; the defaults do nothing.
    Listeners never influence what the stream parses.
    """

    def on_raw_line(self, line: str, line_number: int) -> None:
        pass

    def on_message(self, message: Any, line_number: int) -> None:
        pass

    def on_error(self, error: ParseError) -> None:
        pass


class JsonOutputStream:
    """Turns arbitrarily split chunks of NDJSON into parsed messages.

    Partial lines are buffered until their newline arrives. Every complete
    line is counted and classified: parsed JSON becomes a message, a line
    starting with ``{`` that fails to parse becomes a ParseError, anything
    else (blank lines, log noise, bare scalars) is dropped.

    Owned by a single reader; not safe for concurrent writers.
    """

    def __init__(self, listeners: Sequence[OutputStreamListener] = ()) -> None:
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._messages: list[Any] = []
        self._errors: list[ParseError] = []
        self._line_count = 0
        self._listeners: list[OutputStreamListener] = list(listeners)

    @property
    def messages(self) -> Sequence[Any]:
        return self._messages

    @property
    def errors(self) -> Sequence[ParseError]:
        return self._errors

    @property
    def line_count(self) -> int:
        return self._line_count

    @property
    def pending(self) -> str:
        """Text received since the last newline."""
        return self._buffer

    def add_listener(self, listener: OutputStreamListener) -> None:
        self._listeners.append(listener)
        logger.debug("Registered output listener %r", listener)

    def remove_listener(self, listener: OutputStreamListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def process(self, chunk: str | bytes) -> list[Any]:
        """Consume a chunk and return the messages it completed."""
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk

        *complete, self._buffer = self._buffer.split("\n")

        new_messages = []
        for line in complete:
            parsed = self._handle_line(line)
            if parsed is not None:
                new_messages.append(parsed)
        return new_messages

    def flush(self) -> list[Any]:
        """Treat any buffered partial line as a final complete line."""
        self._buffer += self._decoder.decode(b"", final=True)
        if not self._buffer.strip():
            return []

        line, self._buffer = self._buffer, ""
        parsed = self._handle_line(line)
        return [parsed] if parsed is not None else []

    def _handle_line(self, line: str) -> Any | None:
        self._line_count += 1
        line_number = self._line_count
        self._notify("on_raw_line", line, line_number)

        parsed = parse_ndjson_line(line)
        if parsed is not None:
            self._messages.append(parsed)
            self._notify("on_message", parsed, line_number)
            return parsed

        if line.strip().startswith("{"):
            error = ParseError(line=line, line_number=line_number)
            self._errors.append(error)
            logger.warning("Malformed JSON on output line %d: %.200s", line_number, line)
            self._notify("on_error", error)
        return None

    def _notify(self, hook: str, *args: Any) -> None:
        for listener in self._listeners:
            callback: Callable[..., None] = getattr(listener, hook)
            try:
                callback(*args)
            except Exception:
                logger.warning(
                    "Output listener %r failed in %s", listener, hook, exc_info=True
                )

    def filter_by_type(self, msg_type: str) -> list[Any]:
        """Messages that are objects whose ``type`` equals ``msg_type``."""
        return [
            msg
            for msg in self._messages
            if isinstance(msg, dict) and msg.get("type") == msg_type
        ]

    def find(self, predicate: Callable[[Any], bool]) -> Any | None:
        """First message matching ``predicate``, or None."""
        for msg in self._messages:
            if predicate(msg):
                return msg
        return None

    def reset(self) -> None:
        """Clear all buffered state so the stream can be reused."""
        self._buffer = ""
        self._decoder.reset()
        self._messages.clear()
        self._errors.clear()
        self._line_count = 0
