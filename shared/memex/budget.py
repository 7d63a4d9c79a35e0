"""
Approximate token budget for one invocation.

Every injected line is counted as a fixed number of tokens. The estimate is
coarse on purpose: it bounds how much context one prompt can pull in, it
does not account for it.
"""

from collections.abc import Sequence


class TokenBudget:
    """Running token estimate with a ceiling.

    Usage:
        budget = TokenBudget(ceiling=8000, tokens_per_line=10)
        if budget.has_budget():
            budget.consume(len(lines))
    """

    def __init__(self, ceiling: int, tokens_per_line: int):
        if ceiling <= 0:
            raise ValueError(f"ceiling must be greater than 0, got {ceiling}")
        if tokens_per_line <= 0:
            raise ValueError(f"tokens_per_line must be greater than 0, got {tokens_per_line}")
        self.ceiling = ceiling
        self.tokens_per_line = tokens_per_line
        self._used = 0

    @property
    def used(self) -> int:
        return self._used

    @property
    def exhausted(self) -> bool:
        return self._used >= self.ceiling

    def has_budget(self) -> bool:
        """False once the estimate has reached the ceiling."""
        return not self.exhausted

    def estimate(self, lines: Sequence[str] | int) -> int:
        """Token estimate for a block of lines (or a line count)."""
        count = lines if isinstance(lines, int) else len(lines)
        return count * self.tokens_per_line

    def consume(self, line_count: int) -> int:
        """Add ``line_count`` lines to the estimate and return the new total."""
        if line_count < 0:
            raise ValueError(f"line_count must not be negative, got {line_count}")
        self._used += self.estimate(line_count)
        return self._used

    def __repr__(self) -> str:
        return f"TokenBudget(used={self._used}, ceiling={self.ceiling})"
