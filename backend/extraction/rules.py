"""Rule Set Compilation

A rule set maps field names to rules. Rule sets are usually authored as
loosely-typed data (decoded JSON or YAML), so each raw rule is inspected
once, when the set is compiled, and turned into one of four variants:

    field: 1                          PassThrough: copied verbatim if present
    field: false                      Ignore: never inspected
    field: "must"                     MandatoryString: required, untyped
    field: {"type": "int", ...}       TypedRule: coerced and bound-checked

Anything else is a malformed rule and fails compilation with
MalformedRuleError, so extraction never meets an uninterpretable rule.
"""
from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from core.errors import AppError, AppErrorException, invalid_bound, malformed_rule
from core.logging import extract_logger

log = extract_logger()

SCALAR_TYPES = frozenset({"string", "int", "float", "bool"})
COLLECTION_TYPES = frozenset({"strings", "ints", "floats", "bools"})
BOUND_KEYS = ("min", "max", "min_amt", "max_amt")


class MalformedRuleError(AppErrorException):
    """Raised when a rule set cannot be compiled. A programmer error, not bad input."""


def _to_bound(value: Any) -> int | None:
    """Accept a bound given as int or float; truncate floats toward zero."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("bound must be an int or float, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"bound must be finite, got {value}")
        return int(value)
    raise ValueError(f"bound must be an int or float, got {type(value).__name__}")


Bound = Annotated[int | None, BeforeValidator(_to_bound)]


@dataclass(frozen=True, slots=True)
class PassThrough:
    """Copy the first raw value through unchecked."""


@dataclass(frozen=True, slots=True)
class Ignore:
    """Never inspect or emit the field."""


@dataclass(frozen=True, slots=True)
class MandatoryString:
    """Require the field and emit its first raw value as a string."""


class TypedRule(BaseModel):
    """Structured rule with optional type, mandatory flag and bounds.

    min/max bound the value itself (int), its ceiling (float) or its
    encoded length (string); min_amt/max_amt bound the number of values
    of a collection type. Keys beyond these are kept for extension
    resolvers and can be read with option().
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str | None = None
    must: bool = False
    min: Bound = None
    max: Bound = None
    min_amt: Bound = None
    max_amt: Bound = None

    @property
    def is_collection(self) -> bool:
        return self.type in COLLECTION_TYPES

    @property
    def is_scalar(self) -> bool:
        return self.type in SCALAR_TYPES

    def option(self, name: str, default: Any = None) -> Any:
        """Read an extra key declared on the rule."""
        return (self.model_extra or {}).get(name, default)


Rule = Union[PassThrough, Ignore, MandatoryString, TypedRule]

PASS_THROUGH = PassThrough()
IGNORE = Ignore()
MANDATORY_STRING = MandatoryString()


def _compile_error(error: AppError) -> MalformedRuleError:
    log.error("rule_compile_failed", error_code=error.code.name, **error.metadata)
    return MalformedRuleError(error)


def _compile_typed(field: str, raw: Mapping[str, Any]) -> TypedRule:
    data = dict(raw)
    # Declaring "must" makes the field mandatory, whatever its value.
    if "must" in data:
        data["must"] = True
    try:
        return TypedRule.model_validate(data)
    except ValidationError as e:
        for detail in e.errors():
            loc = detail.get("loc", ())
            if loc and loc[0] in BOUND_KEYS:
                raise _compile_error(invalid_bound(field, str(loc[0]), raw.get(loc[0])).error) from e
        raise _compile_error(malformed_rule(field, raw).error) from e


def compile_rule(field: str, raw: Any) -> Rule:
    """Compile one raw rule into its variant. Raises MalformedRuleError."""
    match raw:
        case PassThrough() | Ignore() | MandatoryString() | TypedRule():
            return raw
        case False:
            return IGNORE
        case True:
            raise _compile_error(malformed_rule(field, raw).error)
        case int() | float():
            return PASS_THROUGH
        case "must":
            return MANDATORY_STRING
        case Mapping():
            return _compile_typed(field, raw)
        case _:
            raise _compile_error(malformed_rule(field, raw).error)


class RuleSet(Mapping[str, Rule]):
    """Immutable mapping from field name to compiled rule."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[str, Rule] | None = None):
        self._rules = MappingProxyType(dict(rules or {}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RuleSet:
        """Compile a loosely-typed rule mapping, failing on the first malformed rule."""
        if isinstance(raw, RuleSet):
            return raw
        compiled = {field: compile_rule(field, rule) for field, rule in raw.items()}
        log.debug("rules_compiled", field_count=len(compiled))
        return cls(compiled)

    def __getitem__(self, field: str) -> Rule:
        return self._rules[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({dict(self._rules)!r})"
