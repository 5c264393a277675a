"""Monadic Error Handling System

Type-safe error handling inspired by Haskell's Either monad and
Rust's Result type.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction

Usage:
    from core.errors import Ok, Err, ErrorCode

    match extractor.extract(data):
        case Ok(fields):
            store(fields)
        case Err(error) if error.code is ErrorCode.E2001_REQUIRED_FIELD_MISSING:
            log.info("missing_field", field=error.field_name)
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    # Constructors
    ok,
    err,
)

from .builders import (
    # Validation (E2xxx)
    validation_error,
    mandatory_field_missing,
    multiple_values,
    field_not_passed,
    collection_not_passed,
    unknown_field_type,
    external_handler_failed,
    # Internal (E9xxx)
    internal_error,
    malformed_rule,
    invalid_bound,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Constructors
    "ok",
    "err",
    # Validation (E2xxx)
    "validation_error",
    "mandatory_field_missing",
    "multiple_values",
    "field_not_passed",
    "collection_not_passed",
    "unknown_field_type",
    "external_handler_failed",
    # Internal (E9xxx)
    "internal_error",
    "malformed_rule",
    "invalid_bound",
    # Handlers
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_result",
]
