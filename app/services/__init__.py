"""
Service layer for business logic implementation.
Contains services for authentication, authorization, listings, sales, payments and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .sale import SaleService
from .payment import PaymentService
from .user import UserService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "SaleService",
    "PaymentService",
    "UserService",
    "ErrorHandlerService"
]
