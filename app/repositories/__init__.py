"""
Repository layer for data access operations.
Provides database operations with proper error handling and logging.
"""

from app.repositories.base import BaseRepository
from app.repositories.property import PropertyRepository, PropertySearchFilters
from app.repositories.user import UserRepository
from app.repositories.sale import SaleRepository
from app.repositories.payment import PaymentRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository",
    "SaleRepository",
    "PaymentRepository"
]
