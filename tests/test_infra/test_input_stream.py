"""Tests for the NDJSON input builder."""

from agentcommander.infra.streaming import JsonInputStream, create_input_stream


class TestJsonInputStream:
    def test_chained_builders(self):
        stream = (
            create_input_stream()
            .add_system_message("Be terse")
            .add_prompt("Hello")
            .add_config({"model": "sonnet"})
        )
        assert stream.messages == [
            {"type": "system", "content": "Be terse"},
            {"type": "user_prompt", "content": "Hello"},
            {"type": "config", "model": "sonnet"},
        ]
        assert len(stream) == 3
        assert stream.size() == 3

    def test_to_string_compact(self):
        stream = JsonInputStream().add_prompt("Hi").add({"n": 1})
        assert stream.to_string() == '{"type":"user_prompt","content":"Hi"}\n{"n":1}\n'
        assert str(stream) == stream.to_string()
        assert stream.to_bytes() == stream.to_string().encode()

    def test_pretty(self):
        stream = JsonInputStream(compact=False).add({"n": 1})
        assert stream.to_string() == '{\n  "n": 1\n}\n'

    def test_none_is_ignored(self):
        stream = JsonInputStream().add(None)
        assert len(stream) == 0
        assert stream.to_string() == ""

    def test_from_messages_and_clear(self):
        stream = JsonInputStream.from_messages([{"a": 1}, None, [2]])
        assert stream.messages == [{"a": 1}, [2]]
        stream.clear()
        assert len(stream) == 0
