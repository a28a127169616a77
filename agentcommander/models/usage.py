"""Token usage and error summaries recovered from agent output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TokenUsage:
    """Token and cost counters accumulated across an agent's messages.

    Not every tool reports every counter; unreported counters stay at zero.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    reasoning_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0
    total_cost: float = 0.0
    step_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.input_tokens,
                self.output_tokens,
                self.total_tokens,
                self.reasoning_tokens,
                self.cache_creation_tokens,
                self.cache_read_tokens,
                self.cache_write_tokens,
                self.total_cost,
                self.step_count,
            )
        )

    def fill_total(self) -> None:
        """Derive total_tokens from input + output when the tool omitted it."""
        if self.total_tokens == 0 and (self.input_tokens or self.output_tokens):
            self.total_tokens = self.input_tokens + self.output_tokens

    def to_dict(self) -> dict:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "reasoning_tokens": self.reasoning_tokens,
            "cache_creation_tokens": self.cache_creation_tokens,
            "cache_read_tokens": self.cache_read_tokens,
            "cache_write_tokens": self.cache_write_tokens,
            "total_cost": self.total_cost,
            "step_count": self.step_count,
        }


@dataclass(frozen=True)
class ErrorResult:
    """First error reported in an agent's structured output, if any."""

    has_error: bool = False
    error_type: str | None = None
    message: str | None = None
