"""
Database models for the Real Estate Marketplace API.
Includes User, Property, Sale and Payment models.
"""

from app.models.user import User, UserRole
from app.models.property import Property, PropertyStatus
from app.models.sale import Sale, SaleStatus
from app.models.payment import Payment, PaymentStatus

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyStatus",
    "Sale",
    "SaleStatus",
    "Payment",
    "PaymentStatus",
]
