"""Tests for usage and error records."""

from agentcommander.models.usage import ErrorResult, TokenUsage


class TestTokenUsage:
    def test_empty(self):
        assert TokenUsage().is_empty
        assert not TokenUsage(step_count=1).is_empty

    def test_fill_total(self):
        usage = TokenUsage(input_tokens=3, output_tokens=4)
        usage.fill_total()
        assert usage.total_tokens == 7

    def test_fill_total_keeps_reported_value(self):
        usage = TokenUsage(input_tokens=3, output_tokens=4, total_tokens=20)
        usage.fill_total()
        assert usage.total_tokens == 20

    def test_to_dict(self):
        data = TokenUsage(input_tokens=1, total_cost=0.5).to_dict()
        assert data["input_tokens"] == 1
        assert data["total_cost"] == 0.5
        assert set(data) >= {"cache_read_tokens", "cache_write_tokens", "step_count"}


class TestErrorResult:
    def test_default(self):
        result = ErrorResult()
        assert result.has_error is False
        assert result.error_type is None
        assert result.message is None
