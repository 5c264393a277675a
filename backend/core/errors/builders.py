"""Domain-Specific Error Builders

Ergonomic constructors for typed extraction errors.
Each builder creates AppError with appropriate code and context.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))


def mandatory_field_missing(field: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Mandatory field '{field}' is missing",
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        field=field,
        origin=origin,
    )


def multiple_values(
    field: str, count: int, *, typed: bool = True, origin: str = ""
) -> Err[AppError]:
    kind = "Field" if typed else "Typeless (string) field"
    return validation_error(
        f"{kind} '{field}' sent with multiple values",
        code=ErrorCode.E2006_MULTIPLE_VALUES,
        field=field,
        origin=origin,
        count=count,
    )


def field_not_passed(
    field: str,
    *,
    type_name: str | None = None,
    constraint: str | None = None,
    origin: str = "",
) -> Err[AppError]:
    """Scalar field failed to parse or fell outside its bounds."""
    kind = "Field" if type_name else "Typeless (string) field"
    return validation_error(
        f"{kind} '{field}' not passed",
        code=ErrorCode.E2008_FIELD_NOT_PASSED,
        field=field,
        origin=origin,
        type=type_name,
        constraint=constraint,
    )


def collection_not_passed(
    field: str,
    *,
    type_name: str,
    constraint: str | None = None,
    index: int | None = None,
    origin: str = "",
) -> Err[AppError]:
    """Collection field failed its count bounds or one of its elements failed."""
    return validation_error(
        f"Collection field '{field}' not passed",
        code=ErrorCode.E2007_COLLECTION_NOT_PASSED,
        field=field,
        origin=origin,
        type=type_name,
        constraint=constraint,
        index=index,
    )


def unknown_field_type(field: str, type_name: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Field '{field}' has unknown type '{type_name}'",
        code=ErrorCode.E2009_UNKNOWN_FIELD_TYPE,
        field=field,
        origin=origin,
        type=type_name,
    )


def external_handler_failed(
    field: str,
    type_name: str,
    reason: str,
    *,
    inner: AppError | None = None,
    cause: Exception | None = None,
    origin: str = "",
) -> Err[AppError]:
    """Wrap a failure reported (or raised) by an extension resolver."""
    return validation_error(
        f"Outside field '{field}' not passed: {reason}",
        code=ErrorCode.E2015_EXTERNAL_HANDLER_FAILED,
        field=field,
        origin=origin,
        cause=cause,
        type=type_name,
        inner_code=inner.code.name if inner else None,
        inner_metadata=inner.metadata if inner and inner.metadata else None,
    )


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9000_INTERNAL_GENERIC,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
        cause=cause,
    ))


def malformed_rule(field: str, rule: Any, origin: str = "") -> Err[AppError]:
    return internal_error(
        f"Can't interpret rule for field '{field}'",
        code=ErrorCode.E9010_MALFORMED_RULE,
        origin=origin,
        field=field,
        rule_type=type(rule).__name__,
    )


def invalid_bound(
    field: str, bound: str, value: Any, origin: str = ""
) -> Err[AppError]:
    return internal_error(
        f"Bound '{bound}' of field '{field}' must be an int or float, got {type(value).__name__}",
        code=ErrorCode.E9011_INVALID_BOUND,
        origin=origin,
        field=field,
        bound=bound,
    )
