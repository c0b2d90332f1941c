"""
User administration service: listing accounts, statistics and role changes.
"""

from typing import List, Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository
from app.models.user import User, UserRole
from app.services.authorization import Actor, Operation, authorize
from app.utils.exceptions import APIException, InternalError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def list_users(self, actor: Actor) -> List[User]:
        """List every account, newest first. Admin only."""
        authorize(Operation.LIST_USERS, actor)

        try:
            return await self.user_repo.list_users()
        except Exception as e:
            logger.error(f"Failed to list users: {e}", exc_info=True)
            raise InternalError("Failed to list users")

    async def get_user_statistics(self, actor: Actor) -> Dict[str, Any]:
        """Count accounts in total, per role and registered in the last 30 days. Admin only."""
        authorize(Operation.VIEW_USER_STATS, actor)

        try:
            return await self.user_repo.get_user_statistics()
        except Exception as e:
            logger.error(f"Failed to compute user statistics: {e}", exc_info=True)
            raise InternalError("Failed to compute user statistics")

    async def update_user_role(self, user_id: uuid.UUID, role: str, actor: Actor) -> Optional[User]:
        """
        Change the role of an account.

        Args:
            user_id: UUID of the user
            role: New role name
            actor: Admin performing the change

        Returns:
            The updated user, or None when no account has this id; that case is
            a no-op rather than an error

        Raises:
            InsufficientPermissionsError: If the actor is not an admin
            ValidationError: If the role name is unknown
        """
        authorize(Operation.UPDATE_USER_ROLE, actor)

        try:
            new_role = UserRole(role)
        except ValueError:
            raise ValidationError("Invalid role")

        try:
            user = await self.user_repo.update_user_role(user_id, new_role)
            if not user:
                logger.debug(f"Role change for unknown user {user_id} matched no rows")
                return None

            logger.info(f"User {user.email} role set to {new_role.value} by {actor.email}")
            return user

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update role of user {user_id}: {e}", exc_info=True)
            raise InternalError("Failed to update user role")
