"""
Tests for error handling.
Tests custom exceptions and error response formatting.
"""

import pytest
import json
from unittest.mock import Mock
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.error import COMMON_ERROR_RESPONSES, error_responses
from app.services.error_handler import ErrorHandlerService
from app.utils.exceptions import (
    ConflictError,
    DuplicateResourceError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    PropertyNotAvailableError,
    SaleNotFoundError,
    TokenExpiredError,
    ValidationError
)


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_format_error_response_without_details(self):
        response = ErrorHandlerService.format_error_response("TEST_ERROR", "Test error message")

        assert "details" not in response["error"]
        assert response["error"]["request_id"]

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(ValidationError("Test validation error"))

        assert response.status_code == 400
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "VALIDATION_ERROR"
        assert response_data["error"]["message"] == "Test validation error"

    def test_handle_validation_error(self):
        mock_error = Mock()
        mock_error.errors.return_value = [
            {
                "loc": ("body", "price"),
                "msg": "Input should be greater than 0",
                "type": "greater_than",
                "input": -5
            },
            {
                "loc": ("body",),
                "msg": "Field required",
                "type": "missing",
                "input": None
            }
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 422
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "VALIDATION_ERROR"
        assert response_data["error"]["details"][0]["field"] == "body -> price"
        assert response_data["error"]["details"][0]["input"] == -5
        assert response_data["error"]["details"][1]["type"] == "missing"

    def test_handle_database_error_hides_details(self):
        db_error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        response = ErrorHandlerService.handle_database_error(db_error)

        assert response.status_code == 500
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "DATABASE_ERROR"
        assert "refused" not in response_data["error"]["message"]

    def test_integrity_error_is_a_conflict(self):
        integrity_error = IntegrityError("INSERT INTO users", {}, Exception("duplicate key"))
        response = ErrorHandlerService.handle_database_error(integrity_error)

        assert response.status_code == 400
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "CONFLICT"
        assert "duplicate" not in response_data["error"]["message"]

    def test_handle_http_exception(self):
        response = ErrorHandlerService.handle_http_exception(StarletteHTTPException(405, "Method Not Allowed"))

        assert response.status_code == 405
        assert json.loads(response.body)["error"]["code"] == "HTTP_405"

    def test_handle_unexpected_error(self):
        response = ErrorHandlerService.handle_unexpected_error(Exception("Unexpected error"))

        assert response.status_code == 500
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "unexpected error occurred" in response_data["error"]["message"].lower()


class TestExceptions:
    """Status codes and error codes of the API exceptions."""

    @pytest.mark.parametrize("exception, status_code, error_code", [
        (ValidationError("bad"), 400, "VALIDATION_ERROR"),
        (DuplicateResourceError("User", "a@example.com"), 400, "VALIDATION_ERROR"),
        (PropertyNotAvailableError(), 400, "CONFLICT"),
        (InvalidCredentialsError(), 401, "UNAUTHORIZED"),
        (TokenExpiredError(), 401, "UNAUTHORIZED"),
        (InsufficientPermissionsError("view sales"), 403, "FORBIDDEN"),
        (SaleNotFoundError("abc"), 404, "NOT_FOUND"),
    ])
    def test_status_and_code(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code

    def test_property_not_available_is_a_conflict(self):
        error = PropertyNotAvailableError()

        assert isinstance(error, ConflictError)
        assert error.detail == "Property not available for sale"

    def test_authentication_errors_carry_bearer_challenge(self):
        assert InvalidCredentialsError().headers == {"WWW-Authenticate": "Bearer"}

    def test_not_found_message(self):
        assert SaleNotFoundError("abc").detail == "Sale not found with ID: abc"


class TestErrorResponseDocs:

    def test_error_responses_selects_codes(self):
        responses = error_responses(401, 404)

        assert set(responses) == {401, 404}
        assert responses[404] == COMMON_ERROR_RESPONSES[404]
