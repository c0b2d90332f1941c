"""
Exceptions raised by the marketplace services.

Each class fixes its HTTP status and error code; the error handler turns
them into the JSON error envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base class for errors that map directly to an HTTP response."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "API_ERROR"

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code or self.http_status, detail=detail, headers=headers)
        self.error_code = error_code or self.default_code


class ValidationError(APIException):
    """Input the service refuses: duplicate email, unknown role, bad filter."""

    http_status = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class DuplicateResourceError(ValidationError):

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


class ConflictError(APIException):
    """The resource is not in the state the operation needs."""

    http_status = status.HTTP_400_BAD_REQUEST
    default_code = "CONFLICT"


class PropertyNotAvailableError(ConflictError):

    def __init__(self, detail: str = "Property not available for sale"):
        super().__init__(detail)


class AuthenticationError(APIException):
    """Missing, invalid or expired bearer token, or wrong credentials."""

    http_status = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentialsError(AuthenticationError):

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail)


class TokenExpiredError(AuthenticationError):

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(AuthenticationError):

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class ForbiddenError(APIException):
    """Authenticated, but the role or ownership rules deny the operation."""

    http_status = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(detail)


class InsufficientPermissionsError(ForbiddenError):

    def __init__(self, action: str):
        super().__init__(f"Not authorized to {action}")


class NotFoundError(APIException):
    http_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"
        super().__init__(detail)


class PropertyNotFoundError(NotFoundError):

    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class SaleNotFoundError(NotFoundError):

    def __init__(self, sale_id: str):
        super().__init__("Sale", sale_id)


class InternalError(APIException):
    """Store or runtime failure; the message never carries driver details."""

    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)
