"""NDJSON streaming helpers for agent stdin/stdout.

The output side decodes chunked process output into messages; the input
side accumulates messages to write to an agent's stdin.
"""

from __future__ import annotations

from agentcommander.infra.streaming.input_stream import JsonInputStream
from agentcommander.infra.streaming.ndjson import (
    parse_ndjson,
    parse_ndjson_line,
    stringify_ndjson,
    stringify_ndjson_line,
)
from agentcommander.infra.streaming.output_stream import (
    JsonOutputStream,
    OutputStreamListener,
    ParseError,
)


def create_output_stream(*listeners: OutputStreamListener) -> JsonOutputStream:
    return JsonOutputStream(listeners)


def create_input_stream(compact: bool = True) -> JsonInputStream:
    return JsonInputStream(compact=compact)


__all__ = [
    "JsonInputStream",
    "JsonOutputStream",
    "OutputStreamListener",
    "ParseError",
    "create_input_stream",
    "create_output_stream",
    "parse_ndjson",
    "parse_ndjson_line",
    "stringify_ndjson",
    "stringify_ndjson_line",
]
