"""Web framework boundary.

Converts Starlette's multi-valued QueryParams / FormData into the plain
field -> list-of-strings shape the engine consumes, and offers a FastAPI
dependency that extracts a request's fields or rejects it with a 400.

    signup = Extractor({"email": "must", "age": {"type": "int", "min": 13}})

    @router.post("/signup")
    async def create(fields: dict = Depends(extracted_fields(signup))):
        ...
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal, Mapping, Sequence

from starlette.datastructures import ImmutableMultiDict, UploadFile
from starlette.requests import Request

from core.errors import AppError, Result, raise_result
from core.logging import api_logger

from .engine import Extractor

log = api_logger()

FormValues = ImmutableMultiDict | Mapping[str, str | Sequence[str]]


def to_multimap(values: FormValues) -> dict[str, list[str]]:
    """Convert framework form/query values to field -> raw values.

    Value order is kept. Uploaded files are not string fields and are
    left out.
    """
    if isinstance(values, ImmutableMultiDict):
        data: dict[str, list[str]] = {}
        for key, value in values.multi_items():
            if isinstance(value, UploadFile):
                continue
            data.setdefault(key, []).append(value)
        return data
    return {key: [value] if isinstance(value, str) else list(value) for key, value in values.items()}


def extract_form(extractor: Extractor, values: FormValues) -> Result[dict[str, Any], AppError]:
    """Extract from framework form/query values."""
    return extractor.extract(to_multimap(values))


def extracted_fields(
    extractor: Extractor,
    *,
    source: Literal["form", "query"] = "form",
) -> Callable[[Request], Awaitable[dict[str, Any]]]:
    """Build a FastAPI dependency yielding the extracted fields of a request.

    Extraction failures raise AppErrorException, rendered by the handlers
    from register_error_handlers() as a 400 JSON error.
    """
    async def dependency(request: Request) -> dict[str, Any]:
        if source == "form":
            values = await request.form()
        else:
            values = request.query_params
        result = extract_form(extractor, values)
        if result.is_err():
            error = result.unwrap_err()
            log.info("submission_rejected", path=request.url.path, field=error.field_name, error_code=error.code.name)
        raise_result(result)
        return result.unwrap()

    return dependency
