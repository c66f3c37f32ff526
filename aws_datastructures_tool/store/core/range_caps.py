"""
Optional bounds for range queries.

A cap is unbounded, a numeric score, or a lexicographic string. Scores of
±infinity and the empty string are unbounded, matching how Redis callers pass
"-inf"/"+inf" and "-"/"+" for open ends.
"""

import math
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RangeCap:
    """One end of a range."""

    bound: int | float | str | None = None
    exclusive: bool = False

    @classmethod
    def score(cls, score: int | float, exclusive: bool = False) -> "RangeCap":
        if isinstance(score, float) and math.isinf(score):
            return UNBOUNDED
        return cls(score, exclusive)

    @classmethod
    def lex(cls, text: str, exclusive: bool = False) -> "RangeCap":
        if text == "":
            return UNBOUNDED
        return cls(text, exclusive)

    @classmethod
    def parse_score(cls, text: str) -> "RangeCap":
        """
        Parse a Redis score bound.

        Args:
            text: '1.5', '(1.5' (exclusive), '-inf', '+inf'

        Returns:
            Range cap

        Raises:
            ValueError: If the bound is not a number
        """
        exclusive = text.startswith("(")
        if exclusive:
            text = text[1:]
        return cls.score(float(text), exclusive)

    @classmethod
    def parse_lex(cls, text: str) -> "RangeCap":
        """
        Parse a Redis lexicographic bound.

        Args:
            text: '[abc' (inclusive), '(abc' (exclusive), '-' or '+' (unbounded)

        Returns:
            Range cap

        Raises:
            ValueError: If the bound has no '[' or '(' prefix
        """
        if text in ("-", "+"):
            return UNBOUNDED
        if text[:1] == "[":
            return cls.lex(text[1:])
        if text[:1] == "(":
            return cls.lex(text[1:], exclusive=True)
        raise ValueError(f"Invalid lex bound '{text}', expected '[', '(', '-' or '+'")

    def present(self) -> bool:
        return self.bound is not None

    def to_attribute(self) -> Decimal | str:
        """Bound as a DynamoDB attribute value."""
        if isinstance(self.bound, str):
            return self.bound
        if isinstance(self.bound, float):
            return Decimal(repr(self.bound))
        return Decimal(self.bound)  # type: ignore[arg-type]


UNBOUNDED = RangeCap()


def empty_range(lower: RangeCap, upper: RangeCap) -> bool:
    """True when no value can satisfy both caps."""
    if not (lower.present() and upper.present()):
        return False
    low, high = lower.to_attribute(), upper.to_attribute()
    if low > high:  # type: ignore[operator]
        return True
    return low == high and (lower.exclusive or upper.exclusive)


def excludes(lower: RangeCap, upper: RangeCap, value: Decimal | str) -> bool:
    """True when ``value`` sits on an exclusive end of the range."""
    if lower.exclusive and lower.present() and value == lower.to_attribute():
        return True
    return upper.exclusive and upper.present() and value == upper.to_attribute()
