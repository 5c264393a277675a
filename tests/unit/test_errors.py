"""Tests for the error taxonomy, Result types and FastAPI handlers."""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.errors import (
    AppError,
    AppErrorException,
    Err,
    ErrorCode,
    Ok,
    collection_not_passed,
    external_handler_failed,
    field_not_passed,
    invalid_bound,
    malformed_rule,
    mandatory_field_missing,
    multiple_values,
    raise_result,
    register_error_handlers,
    unknown_field_type,
)


class TestErrorCode:

    @pytest.mark.parametrize(
        "code",
        [
            ErrorCode.E2001_REQUIRED_FIELD_MISSING,
            ErrorCode.E2006_MULTIPLE_VALUES,
            ErrorCode.E2007_COLLECTION_NOT_PASSED,
            ErrorCode.E2008_FIELD_NOT_PASSED,
            ErrorCode.E2009_UNKNOWN_FIELD_TYPE,
            ErrorCode.E2015_EXTERNAL_HANDLER_FAILED,
        ],
    )
    def test_validation_codes_are_client_errors(self, code: ErrorCode) -> None:
        assert code.http_status == 400
        assert code.category == "validation"

    def test_rule_codes_are_configuration_errors(self) -> None:
        assert ErrorCode.E9010_MALFORMED_RULE.http_status == 500
        assert ErrorCode.E9011_INVALID_BOUND.category == "configuration"
        assert ErrorCode.E9001_UNEXPECTED_ERROR.category == "internal"


class TestBuilders:
    """Each builder yields a distinct code carrying the field name."""

    def test_categories_are_distinct(self) -> None:
        errors = [
            mandatory_field_missing("f"),
            multiple_values("f", 2),
            collection_not_passed("f", type_name="ints"),
            field_not_passed("f", type_name="int"),
            unknown_field_type("f", "date"),
            external_handler_failed("f", "date", "bad"),
            malformed_rule("f", None),
            invalid_bound("f", "min", "1"),
        ]
        codes = {e.unwrap_err().code for e in errors}
        assert len(codes) == len(errors)
        assert all(e.unwrap_err().field_name == "f" for e in errors)

    def test_none_metadata_is_dropped(self) -> None:
        error = collection_not_passed("f", type_name="ints", constraint="count").unwrap_err()
        assert error.metadata == {"field": "f", "type": "ints", "constraint": "count"}

    def test_typeless_messages(self) -> None:
        assert "Typeless" in multiple_values("f", 3, typed=False).unwrap_err().message
        assert "Typeless" in field_not_passed("f").unwrap_err().message


class TestResult:

    def test_ok(self) -> None:
        result = Ok(2)
        assert result.is_ok() and not result.is_err()
        assert result.map(lambda v: v * 2) == Ok(4)
        assert result.and_then(lambda v: Ok(v + 1)).unwrap() == 3
        assert list(result) == [2]

    def test_err(self) -> None:
        result = mandatory_field_missing("f")
        assert result.is_err()
        assert result.unwrap_or("default") == "default"
        assert result.map(lambda v: v) is result
        assert list(result) == []
        with pytest.raises(ValueError):
            result.unwrap()

    def test_map_err(self) -> None:
        result = mandatory_field_missing("f").map_err(lambda e: e.with_metadata(form="signup"))
        assert result.unwrap_err().metadata["form"] == "signup"

    def test_to_dict(self) -> None:
        payload = field_not_passed("age", type_name="int", constraint="bounds").unwrap_err().to_dict()
        assert payload["error"]["code"] == "E2008_FIELD_NOT_PASSED"
        assert payload["error"]["code_num"] == 2008
        assert payload["error"]["metadata"]["constraint"] == "bounds"

    def test_raise_result(self) -> None:
        raise_result(Ok(1))
        with pytest.raises(AppErrorException) as exc_info:
            raise_result(mandatory_field_missing("f"))
        assert exc_info.value.error.code is ErrorCode.E2001_REQUIRED_FIELD_MISSING


class TestHandlers:

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/config")
        async def config():
            raise AppErrorException(AppError(code=ErrorCode.E9010_MALFORMED_RULE, message="bad rules"))

        @app.get("/boom")
        async def boom():
            raise RuntimeError("unexpected")

        return TestClient(app, raise_server_exceptions=False)

    def test_app_error_status(self, client: TestClient) -> None:
        resp = client.get("/config")
        assert resp.status_code == 500
        assert resp.json()["error"]["category"] == "configuration"

    def test_not_found(self, client: TestClient) -> None:
        resp = client.get("/missing")
        assert resp.status_code == 404
        assert resp.json()["error"]["message"] == "Not Found"

    def test_unhandled_exception(self, client: TestClient) -> None:
        resp = client.get("/boom")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "E9001_UNEXPECTED_ERROR"

    def test_err_is_not_exception(self) -> None:
        assert isinstance(mandatory_field_missing("f"), Err)
