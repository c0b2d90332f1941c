"""
Error response formatting for the marketplace API.

Every failure leaves the API in one envelope:

    {"error": {"code", "message", "timestamp", "request_id", "details"?}}

Client errors are logged at WARNING, server errors at ERROR with traceback.
The request id in the envelope is also written to the log line.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An unexpected error occurred. Please try again later."


class ErrorHandlerService:
    """
    Turns exceptions raised while serving a request into enveloped JSON responses.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the error envelope.

        Args:
            error_code: Machine-readable code such as NOT_FOUND
            message: Human-readable message
            details: Optional per-field details
            request_id: Identifier echoed in logs; generated when omitted

        Returns:
            Envelope dictionary
        """
        body: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": ErrorHandlerService._get_current_timestamp(),
            "request_id": request_id or ErrorHandlerService._generate_request_id(),
        }
        if details:
            body["details"] = details
        return {"error": body}

    @staticmethod
    def handle_api_exception(exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        """Respond to a domain error raised by a service or dependency."""
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=getattr(exception, "field_errors", None),
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: RequestValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Respond to a request that failed schema validation.

        Each pydantic error becomes one detail entry with the location joined
        as "body -> field", the message, the error type and the offending input.
        """
        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
                "input": jsonable_encoder(error.get("input"), custom_encoder={bytes: repr})
            }
            for error in exception.errors()
        ]

        return ErrorHandlerService._respond(
            request,
            status_code=422,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=details
        )

    @staticmethod
    def handle_database_error(exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """
        Respond to a database failure that escaped the services.

        A constraint violation, such as two registrations racing for one email,
        is reported as a conflict. Anything else is a 500 that hides the driver message.
        """
        if isinstance(exception, IntegrityError):
            return ErrorHandlerService._respond(
                request,
                status_code=400,
                error_code="CONFLICT",
                message="Request conflicts with existing data",
                exception=exception
            )

        return ErrorHandlerService._respond(
            request,
            status_code=500,
            error_code="DATABASE_ERROR",
            message="Database operation failed",
            exception=exception
        )

    @staticmethod
    def handle_http_exception(exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        """Respond to framework HTTP errors: unknown routes, wrong methods, health failures."""
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        return ErrorHandlerService._respond(
            request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message=GENERIC_SERVER_MESSAGE,
            exception=exception
        )

    @staticmethod
    def _respond(
        request: Optional[Request],
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        exception: Optional[Exception] = None
    ) -> JSONResponse:
        request_id = ErrorHandlerService._generate_request_id()
        path = request.url.path if request else None
        method = request.method if request else None

        extra = {"request_id": request_id, "status_code": status_code, "error_code": error_code, "path": path}
        if status_code >= 500:
            detail = f"{type(exception).__name__}: {exception}" if exception else message
            logger.error(f"[{request_id}] {method} {path} -> {status_code} {detail}", extra=extra, exc_info=exception)
        else:
            logger.warning(f"[{request_id}] {method} {path} -> {status_code} {error_code}: {message}", extra=extra)

        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(error_code, message, details, request_id),
            headers=headers
        )

    @staticmethod
    def _generate_request_id() -> str:
        """Short random id that ties a response to its log line."""
        return uuid.uuid4().hex[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
