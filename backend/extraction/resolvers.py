"""Extension resolvers for type tags the engine does not recognise.

A resolver is handed to the Extractor at construction time and consulted
only for TypedRules whose `type` is none of the built-in scalar or
collection tags.

    registry = ResolverRegistry()

    @registry.handler("date")
    def parse_date(values, rule):
        try:
            return Ok(date.fromisoformat(values[0]))
        except ValueError as e:
            return validation_error(str(e))

    extractor = Extractor(rules, resolver=registry)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

from core.errors import AppError, ErrorCode, Result, validation_error

from .rules import TypedRule

ResolverFunc = Callable[[Sequence[str], TypedRule], Result[Any, AppError]]


@runtime_checkable
class TypeResolver(Protocol):
    """Resolve raw values for an unrecognised type tag."""

    def resolve(self, type_name: str, values: Sequence[str], rule: TypedRule) -> Result[Any, AppError]:
        ...


@dataclass(frozen=True, slots=True)
class FunctionResolver:
    """Adapts a single (values, rule) -> Result callable to TypeResolver."""
    func: ResolverFunc

    def resolve(self, type_name: str, values: Sequence[str], rule: TypedRule) -> Result[Any, AppError]:
        return self.func(values, rule)


class ResolverRegistry:
    """Registry of resolver functions keyed by type tag."""

    __slots__ = ("_handlers",)

    def __init__(self, handlers: dict[str, ResolverFunc] | None = None):
        self._handlers: dict[str, ResolverFunc] = dict(handlers or {})

    def register(self, type_name: str, func: ResolverFunc) -> None:
        self._handlers[type_name] = func

    def handler(self, type_name: str) -> Callable[[ResolverFunc], ResolverFunc]:
        """Decorator form of register()."""
        def decorator(func: ResolverFunc) -> ResolverFunc:
            self.register(type_name, func)
            return func
        return decorator

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._handlers

    def resolve(self, type_name: str, values: Sequence[str], rule: TypedRule) -> Result[Any, AppError]:
        func = self._handlers.get(type_name)
        if func is None:
            return validation_error(
                f"No resolver registered for type '{type_name}'",
                code=ErrorCode.E2009_UNKNOWN_FIELD_TYPE,
                origin="resolver",
                type=type_name,
            )
        return func(values, rule)


def as_resolver(resolver: TypeResolver | ResolverFunc | None) -> TypeResolver | None:
    """Accept a TypeResolver, a bare resolver function, or None."""
    if resolver is None or isinstance(resolver, TypeResolver):
        return resolver
    if callable(resolver):
        return FunctionResolver(resolver)
    raise TypeError(f"resolver must be a TypeResolver or callable, got {type(resolver).__name__}")
