"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies that resolve the bearer token into an Actor.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models.user import User
from app.services.auth import AuthService
from app.services.authorization import Actor
from app.services.payment import PaymentService
from app.services.property import PropertyService
from app.services.sale import SaleService
from app.services.user import UserService
from app.utils.exceptions import AuthenticationError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_sale_service(db: AsyncSession = Depends(get_db)) -> SaleService:
    return SaleService(db)


async def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if not credentials:
        raise AuthenticationError("Authentication token required")
    return credentials.credentials


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Resolve the bearer token into the stored account.

    Raises:
        AuthenticationError: If no token is provided, or it is invalid or expired
    """
    return await auth_service.get_current_user(_bearer_token(credentials))


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Actor:
    """Resolve the bearer token into the actor passed to every service operation."""
    return await auth_service.get_current_actor(_bearer_token(credentials))

