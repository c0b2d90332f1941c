"""
API route handlers for the Real Estate Marketplace API.
Provides organized routing for different API endpoints.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .sales import router as sales_router
from .payments import router as payments_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "properties_router",
    "sales_router",
    "payments_router",
    "users_router"
]
