"""
Utility modules for the Real Estate Marketplace API.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    ForbiddenError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    SaleNotFoundError,
    PropertyNotAvailableError,
    DuplicateResourceError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "ForbiddenError",
    "ConflictError",
    "InternalError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "PropertyNotFoundError",
    "SaleNotFoundError",
    "PropertyNotAvailableError",
    "DuplicateResourceError",
]
