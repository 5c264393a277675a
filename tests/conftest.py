"""Shared pytest fixtures for form extraction tests."""
from __future__ import annotations

import pytest

from core.config import get_settings
from extraction import Extractor, RuleSet


@pytest.fixture
def profile_rules() -> dict:  # type: ignore[type-arg]
    """A rule set touching every rule shape."""
    return {
        "id": 1,
        "csrf": False,
        "email": "must",
        "nickname": {"min": 2, "max": 16},
        "age": {"type": "int", "min": 1, "max": 150},
        "height": {"type": "float", "max": 3},
        "newsletter": {"type": "bool"},
        "tags": {"type": "strings", "max_amt": 3, "max": 10},
        "scores": {"type": "ints", "min_amt": 1, "max_amt": 2},
    }


@pytest.fixture
def profile_rule_set(profile_rules: dict) -> RuleSet:  # type: ignore[type-arg]
    return RuleSet.from_mapping(profile_rules)


@pytest.fixture
def extractor(profile_rules: dict) -> Extractor:  # type: ignore[type-arg]
    return Extractor(profile_rules)


@pytest.fixture
def log_rejections():
    """Temporarily log rejected extractions at INFO."""
    settings = get_settings()
    previous = settings.LOG_REJECTIONS
    settings.LOG_REJECTIONS = True
    yield settings
    settings.LOG_REJECTIONS = previous
