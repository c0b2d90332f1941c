"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    AuthUser,
    AuthResponse,
    CurrentUserResponse
)

# User schemas
from .user import (
    UserResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    UserStatsResponse
)

# Property schemas
from .property import (
    PropertyBase,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySearchParams,
    PropertyCreatedResponse,
    MessageResponse
)

# Sale schemas
from .sale import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    SaleCreatedResponse,
    SaleStatsResponse
)

# Payment schemas
from .payment import (
    PaymentCreate,
    PaymentStatusUpdate,
    PaymentResponse,
    PaymentCreatedResponse
)

# Error schemas
from .error import APIErrorResponse, error_responses

__all__ = [
    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "AuthUser",
    "AuthResponse",
    "CurrentUserResponse",

    # User
    "UserResponse",
    "RoleUpdateRequest",
    "RoleUpdateResponse",
    "UserStatsResponse",

    # Property
    "PropertyBase",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertySearchParams",
    "PropertyCreatedResponse",
    "MessageResponse",

    # Sale
    "SaleCreate",
    "SaleUpdate",
    "SaleResponse",
    "SaleCreatedResponse",
    "SaleStatsResponse",

    # Payment
    "PaymentCreate",
    "PaymentStatusUpdate",
    "PaymentResponse",
    "PaymentCreatedResponse",

    # Errors
    "APIErrorResponse",
    "error_responses"
]
