"""Tests for extension resolvers of unrecognised type tags."""
from __future__ import annotations

from datetime import date
from typing import Sequence

import pytest

from core.errors import ErrorCode, Ok, validation_error
from extraction import Extractor, FunctionResolver, ResolverRegistry, TypedRule, extract


def parse_date(values: Sequence[str], rule: TypedRule):
    try:
        return Ok(date.fromisoformat(values[0]))
    except ValueError as e:
        return validation_error(str(e), field="ignored")


class TestFunctionResolver:

    def test_plain_function_accepted(self) -> None:
        extractor = Extractor({"d": {"type": "date"}}, resolver=parse_date)
        assert isinstance(extractor.resolver, FunctionResolver)
        assert extractor.extract({"d": ["2024-02-29"]}) == Ok({"d": date(2024, 2, 29)})

    def test_resolver_error_is_wrapped(self) -> None:
        result = extract({"d": {"type": "date"}}, {"d": ["not a date"]}, resolver=parse_date)
        error = result.unwrap_err()
        assert error.code is ErrorCode.E2015_EXTERNAL_HANDLER_FAILED
        assert error.field_name == "d"
        assert error.metadata["inner_code"] == "E2000_VALIDATION_GENERIC"
        assert "not a date" in error.message

    def test_resolver_exception_is_wrapped(self) -> None:
        def explode(values, rule):
            raise RuntimeError("backend down")

        error = extract({"d": {"type": "date"}}, {"d": ["x"]}, resolver=explode).unwrap_err()
        assert error.code is ErrorCode.E2015_EXTERNAL_HANDLER_FAILED
        assert isinstance(error.cause, RuntimeError)
        assert "backend down" in error.message

    def test_resolver_receives_values_and_rule(self) -> None:
        seen = {}

        def record(values, rule):
            seen["values"], seen["rule"] = values, rule
            return Ok(values[0].upper())

        result = extract({"c": {"type": "code", "alphabet": "hex"}}, {"c": ["ab"]}, resolver=record)
        assert result == Ok({"c": "AB"})
        assert seen["values"] == ["ab"]
        assert seen["rule"].option("alphabet") == "hex"

    def test_not_consulted_for_builtin_types(self) -> None:
        def never(values, rule):
            raise AssertionError("resolver called")

        assert extract({"n": {"type": "int"}}, {"n": ["1"]}, resolver=never) == Ok({"n": 1})

    def test_resolver_must_return_result(self) -> None:
        with pytest.raises(TypeError):
            extract({"d": {"type": "date"}}, {"d": ["x"]}, resolver=lambda values, rule: "plain")

    def test_non_callable_resolver_rejected(self) -> None:
        with pytest.raises(TypeError):
            Extractor({}, resolver=42)  # type: ignore[arg-type]


class TestResolverRegistry:

    @pytest.fixture
    def registry(self) -> ResolverRegistry:
        registry = ResolverRegistry()
        registry.register("date", parse_date)

        @registry.handler("upper")
        def upper(values, rule):
            return Ok(values[0].upper())

        return registry

    def test_dispatches_by_type(self, registry: ResolverRegistry) -> None:
        rules = {"d": {"type": "date"}, "u": {"type": "upper"}}
        result = extract(rules, {"d": ["2020-01-01"], "u": ["abc"]}, resolver=registry)
        assert result == Ok({"d": date(2020, 1, 1), "u": "ABC"})

    def test_contains(self, registry: ResolverRegistry) -> None:
        assert "date" in registry
        assert "color" not in registry

    def test_unregistered_type_is_unknown(self, registry: ResolverRegistry) -> None:
        error = extract({"c": {"type": "color"}}, {"c": ["red"]}, resolver=registry).unwrap_err()
        assert error.code is ErrorCode.E2009_UNKNOWN_FIELD_TYPE
        assert error.field_name == "c"

    def test_unregistered_type_keeps_resolver_metadata(self) -> None:
        def lookup(values, rule):
            return validation_error(
                "no handler", code=ErrorCode.E2009_UNKNOWN_FIELD_TYPE, type="color", registry="palette"
            )

        error = extract({"c": {"type": "color"}}, {"c": ["red"]}, resolver=lookup).unwrap_err()
        assert error.code is ErrorCode.E2009_UNKNOWN_FIELD_TYPE
        assert error.field_name == "c"
        assert error.metadata["registry"] == "palette"
        assert "'c'" in error.message
