"""
Test configuration and fixtures for the real estate marketplace API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read at import time, so configure them before importing the app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"

import pytest
import uuid
from typing import AsyncGenerator, Dict, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

import app.models  # noqa: F401
from app.main import app
from app.database import Base, get_db
from app.models.user import User, UserRole
from app.models.property import Property
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.services.auth import AuthService
from app.services.authorization import Actor
from app.services.payment import PaymentService
from app.services.property import PropertyService
from app.services.sale import SaleService
from app.services.user import UserService
from app.utils.auth import create_access_token


TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client; every request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def sale_service(db_session: AsyncSession) -> SaleService:
    return SaleService(db_session)


@pytest.fixture
def payment_service(db_session: AsyncSession) -> PaymentService:
    return PaymentService(db_session)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        role: UserRole = UserRole.BUYER
    ) -> dict:
        return {
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "phone": "+1-555-0100",
            "role": role
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        seller_id: uuid.UUID,
        title: str = "Test Property",
        price: Decimal = Decimal("300000.00"),
        city: str = "Springfield",
        property_type: str = "house"
    ) -> dict:
        return {
            "seller_id": seller_id,
            "title": title,
            "description": "A beautiful test property",
            "property_type": property_type,
            "price": price,
            "address": "12 Oak Street",
            "city": city,
            "state": "IL",
            "zip_code": "62701",
            "bedrooms": 3,
            "bathrooms": Decimal("2"),
            "square_feet": 1800
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, seller_id: uuid.UUID, **kwargs) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_property(
            PropertyFactory.create_property_data(seller_id, **kwargs)
        )


# Common test fixtures
@pytest.fixture
async def test_buyer(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="buyer@example.com", first_name="Bea", last_name="Buyer", role=UserRole.BUYER
    )


@pytest.fixture
async def other_buyer(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="other.buyer@example.com", first_name="Otto", last_name="Buyer", role=UserRole.BUYER
    )


@pytest.fixture
async def test_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="seller@example.com", first_name="Sam", last_name="Seller", role=UserRole.SELLER
    )


@pytest.fixture
async def other_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="other.seller@example.com", first_name="Sid", last_name="Seller", role=UserRole.SELLER
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="admin@example.com", first_name="Ada", last_name="Admin", role=UserRole.ADMIN
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_seller: User) -> Property:
    return await PropertyFactory.create_property(property_repository, seller_id=test_seller.id)


# Actors
@pytest.fixture
def buyer_actor(test_buyer: User) -> Actor:
    return Actor.from_user(test_buyer)


@pytest.fixture
def other_buyer_actor(other_buyer: User) -> Actor:
    return Actor.from_user(other_buyer)


@pytest.fixture
def seller_actor(test_seller: User) -> Actor:
    return Actor.from_user(test_seller)


@pytest.fixture
def other_seller_actor(other_seller: User) -> Actor:
    return Actor.from_user(other_seller)


@pytest.fixture
def admin_actor(test_admin: User) -> Actor:
    return Actor.from_user(test_admin)


# Utility functions for tests
def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a user."""
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}
