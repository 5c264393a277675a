"""Shared min/max comparison for values, string lengths and value counts."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .rules import TypedRule


def within(magnitude: int, lower: int | None, upper: int | None) -> bool:
    """Check an integer magnitude against inclusive bounds. None means unbounded."""
    if lower is not None and magnitude < lower:
        return False
    if upper is not None and magnitude > upper:
        return False
    return True


def within_value_bounds(magnitude: int, rule: TypedRule) -> bool:
    """Apply the rule's min/max to a value, its ceiling or its length."""
    return within(magnitude, rule.min, rule.max)


def within_count_bounds(count: int, rule: TypedRule) -> bool:
    """Apply the rule's min_amt/max_amt to the number of raw values."""
    return within(count, rule.min_amt, rule.max_amt)


def has_value_bounds(rule: TypedRule) -> bool:
    return rule.min is not None or rule.max is not None
