"""Tests for the shared bounds checker."""
from __future__ import annotations

import pytest

from extraction import TypedRule, within, within_count_bounds, within_value_bounds


class TestWithin:
    """Inclusive min/max comparison."""

    @pytest.mark.parametrize(
        ("magnitude", "lower", "upper", "expected"),
        [
            (5, None, None, True),
            (5, 5, None, True),
            (4, 5, None, False),
            (5, None, 5, True),
            (6, None, 5, False),
            (-3, -5, -1, True),
            (0, 1, 10, False),
        ],
    )
    def test_bounds(self, magnitude: int, lower: int | None, upper: int | None, expected: bool) -> None:
        assert within(magnitude, lower, upper) is expected

    def test_max_checked_when_min_present(self) -> None:
        """Both sides are enforced together."""
        assert within(11, 1, 10) is False


class TestRuleBounds:
    """min/max versus min_amt/max_amt on a rule."""

    def test_value_bounds_use_min_max(self) -> None:
        rule = TypedRule(type="int", min=1, max=10, min_amt=5, max_amt=6)
        assert within_value_bounds(3, rule)
        assert not within_value_bounds(11, rule)

    def test_count_bounds_use_amounts(self) -> None:
        rule = TypedRule(type="ints", min=100, max=200, min_amt=1, max_amt=2)
        assert within_count_bounds(2, rule)
        assert not within_count_bounds(0, rule)
        assert not within_count_bounds(3, rule)

    def test_float_bounds_are_truncated_once(self) -> None:
        """Bounds authored as floats compile to integers."""
        rule = TypedRule.model_validate({"type": "int", "min": 1.0, "max": 10.9})
        assert rule.min == 1
        assert rule.max == 10
        assert within_value_bounds(10, rule)
        assert not within_value_bounds(11, rule)
