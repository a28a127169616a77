"""Tests for the NDJSON line codec."""

from agentcommander.infra.streaming.ndjson import (
    looks_like_json,
    parse_ndjson,
    parse_ndjson_line,
    stringify_ndjson,
    stringify_ndjson_line,
)


class TestParseLine:
    def test_object(self):
        assert parse_ndjson_line('{"type":"message"}') == {"type": "message"}

    def test_array_with_surrounding_whitespace(self):
        assert parse_ndjson_line("  [1, 2]\t") == [1, 2]

    def test_blank_lines(self):
        assert parse_ndjson_line("") is None
        assert parse_ndjson_line("   ") is None

    def test_bare_scalars_are_not_candidates(self):
        assert parse_ndjson_line("123") is None
        assert parse_ndjson_line('"text"') is None
        assert parse_ndjson_line("true") is None

    def test_plain_text(self):
        assert parse_ndjson_line("Starting agent...") is None

    def test_malformed_candidate(self):
        assert parse_ndjson_line('{"type": ') is None

    def test_looks_like_json(self):
        assert looks_like_json(' {"a": 1}')
        assert looks_like_json("[")
        assert not looks_like_json("null")


class TestStringifyLine:
    def test_compact(self):
        assert stringify_ndjson_line({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}\n'

    def test_none_renders_empty(self):
        assert stringify_ndjson_line(None) == ""

    def test_pretty(self):
        text = stringify_ndjson_line({"a": 1}, compact=False)
        assert text == '{\n  "a": 1\n}\n'

    def test_non_ascii_is_kept(self):
        assert stringify_ndjson_line({"text": "héllo"}) == '{"text":"héllo"}\n'

    def test_scalar_serializes_but_does_not_parse_back(self):
        line = stringify_ndjson_line(42)
        assert line == "42\n"
        assert parse_ndjson_line(line) is None

    def test_object_round_trip(self):
        value = {"type": "result", "nested": {"items": [1, "two", None]}}
        assert parse_ndjson_line(stringify_ndjson_line(value)) == value


class TestParseAll:
    def test_skips_blank_lines(self):
        assert parse_ndjson('{"a":1}\n\n{"b":2}\n') == [{"a": 1}, {"b": 2}]

    def test_skips_noise_and_malformed_lines(self):
        data = 'log line\n{"a":1}\n{broken\n123\n[true]'
        assert parse_ndjson(data) == [{"a": 1}, [True]]

    def test_empty(self):
        assert parse_ndjson("") == []

    def test_stringify_many(self):
        assert stringify_ndjson([{"a": 1}, None, [2]]) == '{"a":1}\n[2]\n'
