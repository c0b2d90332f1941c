"""
User repository: account creation, credential checks, role changes and
the admin dashboard counts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from app.repositories.base import BaseRepository
from app.models.user import User, UserRole
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)

RECENT_USERS_WINDOW = timedelta(days=30)


class UserRepository(BaseRepository[User]):

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create an account from registration data.

        The email is normalized, the plain ``password`` is replaced by its
        bcrypt hash and the role defaults to buyer.

        Args:
            user_data: email, password, first_name, last_name and optionally phone and role

        Returns:
            Created user

        Raises:
            ValueError: If the email is malformed or taken, or the password is too short
        """
        data = dict(user_data)
        email = User.validate_email_format(data.pop("email"))

        if await self.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        data["email"] = email
        data["hashed_password"] = User.hash_password(data.pop("password"))
        data["role"] = data.get("role") or UserRole.BUYER

        user = await self.create(data)
        logger.info(f"Created {user.role.value} account {user.email} (ID: {user.id})")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look an account up by email, ignoring case and surrounding spaces."""
        return await self.get_by_field("email", email.strip().lower())

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Check a login.

        Returns:
            The user when the email exists and the password matches, None otherwise
        """
        user = await self.get_by_email(email)
        if user is None:
            logger.debug(f"Login for unknown email {email}")
            return None

        if not user.verify_password(password):
            logger.debug(f"Wrong password for {email}")
            return None

        return user

    async def update_user_role(self, user_id: uuid.UUID, new_role: UserRole) -> Optional[User]:
        """Change the role of an account; None when the account does not exist."""
        user = await self.update(user_id, {"role": new_role})
        if user:
            logger.info(f"Role of {user.email} is now {new_role.value}")
        return user

    async def list_users(self) -> List[User]:
        """Every account, newest first."""
        result = await self.db.execute(select(User).order_by(desc(User.created_at)))
        return list(result.scalars().all())

    async def get_user_statistics(self) -> Dict[str, Any]:
        """
        Account counts for the admin dashboard.

        Returns:
            total_users, users_by_role (every role present, zero when empty)
            and recent_users registered within RECENT_USERS_WINDOW
        """
        try:
            total_users = await self.count()

            users_by_role = {role.value: 0 for role in UserRole}
            role_rows = await self.db.execute(
                select(User.role, func.count(User.id)).group_by(User.role)
            )
            for role, count in role_rows.all():
                users_by_role[role.value] = count

            since = datetime.now(timezone.utc) - RECENT_USERS_WINDOW
            recent_users = (
                await self.db.execute(select(func.count(User.id)).where(User.created_at >= since))
            ).scalar()

            return {
                "total_users": total_users,
                "users_by_role": users_by_role,
                "recent_users": recent_users
            }
        except Exception as e:
            logger.error(f"Failed to get user statistics: {e}")
            raise
