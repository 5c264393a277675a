"""Raw String Coercion

Converts raw submitted strings into typed values. Parse failures and bound
failures are ordinary outcomes, reported through Coercion rather than raised.

Scalar coercers:
- string: always parses; bound applies to the UTF-8 encoded length
- int:    signed 64-bit base-10 integer; bound applies to the value
- float:  64-bit float; bound applies to the value rounded up (ceiling)
- bool:   1/t/T/TRUE/true/True and 0/f/F/FALSE/false/False; bounds ignored

Collection coercers apply a scalar coercer to every raw value after
checking the value count, stopping at the first failing element.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Iterator, Sequence, TypeVar
import math
import re

from .bounds import has_value_bounds, within_count_bounds, within_value_bounds
from .rules import TypedRule

T = TypeVar("T")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True, slots=True)
class Coercion(Generic[T]):
    """Outcome of a coercion. Unpacks as (value, ok).

    constraint names what failed: "parse", "bounds" or "count".
    index is the position of the failing element in a collection.
    """
    value: T | None
    ok: bool
    constraint: str | None = None
    index: int | None = None

    @classmethod
    def passed(cls, value: T) -> Coercion[T]:
        return cls(value=value, ok=True)

    @classmethod
    def failed(cls, constraint: str, value: Any = None, index: int | None = None) -> Coercion:
        return cls(value=value, ok=False, constraint=constraint, index=index)

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.ok


@dataclass(frozen=True, slots=True)
class ScalarCoercer(ABC, Generic[T]):
    """Base class for single-value coercers."""

    bounded: ClassVar[bool] = True

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Rule type tag this coercer handles."""

    @abstractmethod
    def parse(self, raw: str) -> Coercion[T]:
        """Parse a raw string, without bound checks."""

    @abstractmethod
    def magnitude(self, value: T) -> int | None:
        """Integer checked against min/max; None when no finite magnitude exists."""

    def coerce(self, raw: str, rule: TypedRule) -> Coercion[T]:
        parsed = self.parse(raw)
        if not parsed.ok or not self.bounded:
            return parsed
        magnitude = self.magnitude(parsed.value)
        if magnitude is None:
            in_bounds = not has_value_bounds(rule)
        else:
            in_bounds = within_value_bounds(magnitude, rule)
        if not in_bounds:
            return Coercion.failed("bounds", parsed.value)
        return parsed

    def __call__(self, raw: str, rule: TypedRule) -> Coercion[T]:
        return self.coerce(raw, rule)


@dataclass(frozen=True, slots=True)
class StringCoercer(ScalarCoercer[str]):

    @property
    def type_name(self) -> str:
        return "string"

    def parse(self, raw: str) -> Coercion[str]:
        return Coercion.passed(raw)

    def magnitude(self, value: str) -> int:
        return len(value.encode("utf-8", "surrogatepass"))


@dataclass(frozen=True, slots=True)
class IntCoercer(ScalarCoercer[int]):
    PATTERN: ClassVar[re.Pattern] = re.compile(r"[+-]?[0-9]+")

    @property
    def type_name(self) -> str:
        return "int"

    def parse(self, raw: str) -> Coercion[int]:
        if not self.PATTERN.fullmatch(raw):
            return Coercion.failed("parse")
        value = int(raw)
        if not INT64_MIN <= value <= INT64_MAX:
            return Coercion.failed("parse")
        return Coercion.passed(value)

    def magnitude(self, value: int) -> int:
        return value


@dataclass(frozen=True, slots=True)
class FloatCoercer(ScalarCoercer[float]):
    """Bounds compare against the ceiling, so 5.9 fails max 5 while 5.0 passes."""
    INFINITY: ClassVar[re.Pattern] = re.compile(r"[+-]?inf(inity)?", re.IGNORECASE)

    @property
    def type_name(self) -> str:
        return "float"

    def parse(self, raw: str) -> Coercion[float]:
        if not raw or not raw.isascii() or raw != raw.strip() or "_" in raw:
            return Coercion.failed("parse")
        try:
            value = float(raw)
        except ValueError:
            return Coercion.failed("parse")
        # finite literal out of float64 range
        if math.isinf(value) and not self.INFINITY.fullmatch(raw):
            return Coercion.failed("parse")
        return Coercion.passed(value)

    def magnitude(self, value: float) -> int | None:
        if not math.isfinite(value):
            return None
        return math.ceil(value)


@dataclass(frozen=True, slots=True)
class BoolCoercer(ScalarCoercer[bool]):
    bounded: ClassVar[bool] = False
    true_values: ClassVar[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
    false_values: ClassVar[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})

    @property
    def type_name(self) -> str:
        return "bool"

    def parse(self, raw: str) -> Coercion[bool]:
        if raw in self.true_values:
            return Coercion.passed(True)
        if raw in self.false_values:
            return Coercion.passed(False)
        return Coercion.failed("parse")

    def magnitude(self, value: bool) -> None:
        return None


@dataclass(frozen=True, slots=True)
class CollectionCoercer(Generic[T]):
    """Coerce every raw value of a multi-valued field with one scalar coercer.

    All-or-nothing: on failure the partial value list is not meaningful.
    """
    element: ScalarCoercer[T]

    @property
    def type_name(self) -> str:
        return f"{self.element.type_name}s"

    def coerce(self, raw_values: Sequence[str], rule: TypedRule) -> Coercion[list[T]]:
        if not within_count_bounds(len(raw_values), rule):
            return Coercion.failed("count", [])
        values: list[T] = []
        for index, raw in enumerate(raw_values):
            item = self.element.coerce(raw, rule)
            if not item.ok:
                return Coercion.failed(item.constraint or "parse", values, index)
            values.append(item.value)
        return Coercion.passed(values)

    def __call__(self, raw_values: Sequence[str], rule: TypedRule) -> Coercion[list[T]]:
        return self.coerce(raw_values, rule)


STRING = StringCoercer()
INT = IntCoercer()
FLOAT = FloatCoercer()
BOOL = BoolCoercer()

SCALAR_COERCERS: dict[str, ScalarCoercer] = {c.type_name: c for c in (STRING, INT, FLOAT, BOOL)}

COLLECTION_COERCERS: dict[str, CollectionCoercer] = {
    f"{name}s": CollectionCoercer(coercer) for name, coercer in SCALAR_COERCERS.items()
}
