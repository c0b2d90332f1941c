"""
Authentication service for registration, login and token-based identity.
Issues access tokens and resolves them back into users and actors.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError, ExpiredSignatureError
from app.repositories.user import UserRepository
from app.config import settings
from app.models.user import User, UserRole
from app.schemas.auth import RegisterRequest
from app.services.authorization import Actor
from app.utils.auth import create_access_token, verify_token
from app.utils.exceptions import (
    APIException,
    ValidationError,
    DuplicateResourceError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service handling registration, login and token verification.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """
        Register an account and issue an access token. The role defaults to buyer.

        Args:
            data: Registration data

        Returns:
            Tuple of (user, access_token)

        Raises:
            ValidationError: If the email is taken, or an admin role is requested
                while ALLOW_ADMIN_SELF_REGISTRATION is off
        """
        try:
            if data.role == UserRole.ADMIN and not settings.allow_admin_self_registration:
                raise ValidationError("Administrator accounts cannot be self-registered")

            existing_user = await self.user_repo.get_by_email(data.email)
            if existing_user:
                raise DuplicateResourceError("User", data.email)

            user = await self.user_repo.create_user(data.model_dump())
            token = self.create_token(user)

            logger.info(f"User registered: {user.email} as {user.role.value} (ID: {user.id})")
            return user, token

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Registration failed for {data.email}: {e}", exc_info=True)
            raise InternalError("Failed to register user")

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        try:
            user = await self.user_repo.authenticate_user(email, password)

            if not user:
                logger.warning(f"Failed authentication attempt for email: {email}")
                raise InvalidCredentialsError()

            return user

        except InvalidCredentialsError:
            raise
        except Exception as e:
            logger.error(f"Authentication error for {email}: {e}", exc_info=True)
            raise InternalError("Failed to authenticate user")

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and create an access token.

        Returns:
            Tuple of (user, access_token)
        """
        user = await self.authenticate_user(email, password)
        token = self.create_token(user)

        logger.info(f"User logged in: {user.email}")
        return user, token

    def create_token(self, user: User) -> str:
        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Args:
            token: JWT access token

        Returns:
            Current User object

        Raises:
            TokenExpiredError: If token is expired
            InvalidTokenError: If token is invalid or its user no longer exists
        """
        try:
            token_payload = verify_token(token, token_type="access")
            user_id = uuid.UUID(token_payload.user_id)
        except ExpiredSignatureError:
            logger.warning("Rejected expired access token")
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            logger.warning(f"Rejected invalid access token: {e}")
            raise InvalidTokenError()

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            logger.warning(f"Access token refers to unknown user {user_id}")
            raise InvalidTokenError()

        return user

    async def get_current_actor(self, token: str) -> Actor:
        """Resolve an access token into the actor performing the request."""
        user = await self.get_current_user(token)
        return Actor.from_user(user)
