"""Extraction Engine

Turns multi-valued raw string input into a typed, checked mapping according
to a compiled RuleSet, or fails with the first violation.

Every declared field is handled on its own; the first field producing an
error aborts the whole extraction and only the error is returned. Fields
that are absent and optional are left out of the output rather than set to
a zero value.

Usage:
    extractor = Extractor({
        "title": {"type": "string", "must": True, "min": 1, "max": 120},
        "tags": {"type": "strings", "max_amt": 5},
        "draft": {"type": "bool"},
        "csrf": False,
    })
    match extractor.extract({"title": ["Hello"], "tags": ["a", "b"]}):
        case Ok(fields):
            save(fields)
        case Err(error):
            reject(error)
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.config import get_settings
from core.errors import (
    AppError,
    Err,
    ErrorCode,
    Ok,
    Result,
    collection_not_passed,
    external_handler_failed,
    field_not_passed,
    malformed_rule,
    mandatory_field_missing,
    multiple_values,
    unknown_field_type,
)
from core.logging import extract_logger

from .coercion import COLLECTION_COERCERS, SCALAR_COERCERS, STRING
from .resolvers import ResolverFunc, TypeResolver, as_resolver
from .rules import Ignore, MandatoryString, PassThrough, RuleSet, TypedRule

log = extract_logger()

RawData = Mapping[str, Sequence[str]]

# Marks a field that produces no output entry and no error.
_SKIP = object()


def _extract_typed(
    name: str, rule: TypedRule, values: Sequence[str], resolver: TypeResolver | None
) -> Result[Any, AppError]:
    if rule.type is None:
        if len(values) > 1:
            return multiple_values(name, len(values), typed=False)
        coerced = STRING.coerce(values[0], rule)
        if coerced.ok:
            return Ok(coerced.value)
        # Optional untyped fields failing their bounds are dropped, not reported.
        if rule.must:
            return field_not_passed(name, constraint=coerced.constraint)
        log.debug("field_dropped", field=name, constraint=coerced.constraint)
        return Ok(_SKIP)

    if (collection := COLLECTION_COERCERS.get(rule.type)) is not None:
        coerced = collection.coerce(values, rule)
        if coerced.ok:
            return Ok(coerced.value)
        return collection_not_passed(
            name, type_name=rule.type, constraint=coerced.constraint, index=coerced.index
        )

    if len(values) > 1:
        return multiple_values(name, len(values))

    if (scalar := SCALAR_COERCERS.get(rule.type)) is not None:
        coerced = scalar.coerce(values[0], rule)
        if coerced.ok:
            return Ok(coerced.value)
        return field_not_passed(name, type_name=rule.type, constraint=coerced.constraint)

    if resolver is None:
        return unknown_field_type(name, rule.type)
    return _resolve(name, rule, values, resolver)


def _resolve(
    name: str, rule: TypedRule, values: Sequence[str], resolver: TypeResolver
) -> Result[Any, AppError]:
    try:
        result = resolver.resolve(rule.type, list(values), rule)
    except Exception as e:
        log.warning("resolver_raised", field=name, type=rule.type, error_type=type(e).__name__)
        return external_handler_failed(name, rule.type, str(e) or type(e).__name__, cause=e)

    match result:
        case Ok():
            return result
        case Err(error) if error.code is ErrorCode.E2009_UNKNOWN_FIELD_TYPE:
            # Reported against this field; the resolver's own metadata is kept.
            return unknown_field_type(name, rule.type).map_err(
                lambda unknown: unknown.with_metadata(**{**error.metadata, **unknown.metadata})
            )
        case Err(error):
            return external_handler_failed(name, rule.type, error.message, inner=error, cause=error.cause)
        case _:
            raise TypeError(
                f"resolver for type '{rule.type}' must return Ok or Err, got {type(result).__name__}"
            )


def _extract_field(
    name: str, rule: Any, values: Sequence[str] | None, resolver: TypeResolver | None
) -> Result[Any, AppError]:
    present = bool(values)
    match rule:
        case PassThrough():
            return Ok(values[0]) if present else Ok(_SKIP)
        case Ignore():
            return Ok(_SKIP)
        case MandatoryString():
            return Ok(values[0]) if present else mandatory_field_missing(name)
        case TypedRule():
            if not present:
                return mandatory_field_missing(name) if rule.must else Ok(_SKIP)
            return _extract_typed(name, rule, values, resolver)
        case _:
            return malformed_rule(name, rule)


def extract(
    rules: RuleSet | Mapping[str, Any],
    data: RawData,
    resolver: TypeResolver | ResolverFunc | None = None,
) -> Result[dict[str, Any], AppError]:
    """Extract and check every field declared in rules from data.

    A raw rule mapping is compiled first and may raise MalformedRuleError.
    Returns Ok with the output mapping, or Err with the first error found.
    The rule set is only read; calls may run concurrently on a shared one.
    """
    rules = RuleSet.from_mapping(rules)
    resolver = as_resolver(resolver)
    output: dict[str, Any] = {}
    for name, rule in rules.items():
        match _extract_field(name, rule, data.get(name), resolver):
            case Ok(value):
                if value is not _SKIP:
                    output[name] = value
            case Err(error) as failure:
                log_method = log.info if get_settings().LOG_REJECTIONS else log.debug
                log_method("extraction_rejected", field=name, error_code=error.code.name)
                return failure
    log.debug("extraction_completed", field_count=len(output))
    return Ok(output)


class Extractor:
    """Rule set bound to an optional extension resolver.

    The rule set can be replaced with reset_rules(); a call already in
    progress keeps the rule set it started with. Concurrent replacement by
    several writers is the caller's to serialise.
    """

    __slots__ = ("_rules", "resolver")

    def __init__(
        self,
        rules: RuleSet | Mapping[str, Any],
        resolver: TypeResolver | ResolverFunc | None = None,
    ):
        self._rules = RuleSet.from_mapping(rules)
        self.resolver = as_resolver(resolver)

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def reset_rules(self, rules: RuleSet | Mapping[str, Any]) -> None:
        """Compile and swap in a new rule set for subsequent calls."""
        compiled = RuleSet.from_mapping(rules)
        self._rules = compiled
        log.info("rules_reset", field_count=len(compiled))

    def extract(self, data: RawData) -> Result[dict[str, Any], AppError]:
        return extract(self._rules, data, self.resolver)
