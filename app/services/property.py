"""
Property service for managing listings and their availability lifecycle.

Listing status moves available -> pending -> sold, or back from pending to
available when a sale is cancelled. ``mark_pending``, ``mark_sold`` and
``mark_available`` are the lifecycle paths used by the sale workflow; they
write inside the caller's transaction and never commit.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.property import PropertyRepository, PropertySearchFilters
from app.models.property import Property, PropertyStatus
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertySearchParams
from app.services.authorization import (
    Actor,
    Operation,
    OwnershipFacts,
    authorize,
    resolve_seller_id
)
from app.utils.exceptions import (
    APIException,
    ConflictError,
    InternalError,
    PropertyNotAvailableError,
    PropertyNotFoundError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for listing CRUD, ownership checks and status transitions.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def create_property(self, property_data: PropertyCreate, actor: Actor) -> Property:
        """
        Create a new listing in status available.

        Args:
            property_data: Property creation data
            actor: Seller or admin creating the listing

        Returns:
            Created property instance

        Raises:
            InsufficientPermissionsError: If the actor is a buyer
        """
        authorize(Operation.CREATE_PROPERTY, actor)

        try:
            create_data = property_data.model_dump(exclude={"seller_id"})
            create_data["seller_id"] = resolve_seller_id(actor, property_data.seller_id)

            property_obj = await self.property_repo.create_property(create_data)

            logger.info(f"Property created by {actor.email}: {property_obj.title} (ID: {property_obj.id})")
            return property_obj

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create property for user {actor.id}: {e}", exc_info=True)
            raise InternalError("Failed to create property")

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID. Listings are public.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        try:
            property_obj = await self.property_repo.get_by_id(property_id)

            if not property_obj:
                raise PropertyNotFoundError(str(property_id))

            return property_obj

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to get property {property_id}: {e}", exc_info=True)
            raise InternalError("Failed to retrieve property")

    async def list_properties(self, params: Optional[PropertySearchParams] = None) -> List[Property]:
        """
        List properties matching the filters, newest first.

        Args:
            params: Optional listing filters

        Returns:
            List of properties with seller contact details loaded
        """
        try:
            filters = PropertySearchFilters(**params.model_dump()) if params else PropertySearchFilters()
            return await self.property_repo.list_properties(filters)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}", exc_info=True)
            raise InternalError("Failed to list properties")

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        actor: Actor
    ) -> Property:
        """
        Update a listing as its owner or an admin.

        A status present in the payload overrides the lifecycle; the override
        is logged.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            InsufficientPermissionsError: If the actor neither owns the listing nor is admin
        """
        property_obj = await self.get_property(property_id)
        authorize(Operation.UPDATE_PROPERTY, actor, OwnershipFacts.for_property(property_obj))

        try:
            update_data: Dict[str, Any] = property_data.model_dump(exclude_unset=True)

            new_status = update_data.get("status")
            if new_status is not None and new_status != property_obj.status:
                logger.warning(
                    f"Property {property_id} status set directly by {actor.email}: "
                    f"{property_obj.status.value} -> {new_status.value}"
                )

            updated_property = await self.property_repo.update(property_id, update_data)

            logger.info(f"Property updated by {actor.email}: {property_id}")
            return updated_property

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}", exc_info=True)
            raise InternalError("Failed to update property")

    async def delete_property(self, property_id: uuid.UUID, actor: Actor) -> bool:
        """
        Delete a listing as its owner or an admin.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            InsufficientPermissionsError: If the actor neither owns the listing nor is admin
        """
        property_obj = await self.get_property(property_id)
        authorize(Operation.DELETE_PROPERTY, actor, OwnershipFacts.for_property(property_obj))

        try:
            deleted = await self.property_repo.delete(property_id)

            logger.info(f"Property deleted by {actor.email}: {property_id}")
            return deleted

        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}", exc_info=True)
            raise InternalError("Failed to delete property")

    async def lock_property(self, property_id: uuid.UUID) -> Property:
        """
        Lock a listing row for the rest of the caller's transaction.

        Raises:
            PropertyNotAvailableError: If the property is missing or not available
        """
        property_obj = await self.property_repo.get_for_update(property_id)
        if not property_obj or not property_obj.is_available:
            raise PropertyNotAvailableError()
        return property_obj

    async def mark_pending(self, property_id: uuid.UUID) -> None:
        """
        Move a listing from available to pending.

        Raises:
            ConflictError: If the listing is missing or not available
        """
        moved = await self.property_repo.compare_and_set_status(
            property_id, PropertyStatus.AVAILABLE, PropertyStatus.PENDING
        )
        if not moved:
            raise PropertyNotAvailableError()
        logger.info(f"Property {property_id} marked pending")

    async def mark_sold(self, property_id: uuid.UUID) -> None:
        """Record a completed sale on the listing."""
        await self._transition(property_id, PropertyStatus.SOLD)

    async def mark_available(self, property_id: uuid.UUID) -> None:
        """Return the listing to the market after a cancelled sale."""
        await self._transition(property_id, PropertyStatus.AVAILABLE)

    async def _transition(self, property_id: uuid.UUID, target: PropertyStatus) -> None:
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise ConflictError(f"Property {property_id} no longer exists")

        current = property_obj.status
        if current != target and not current.can_transition_to(target):
            logger.warning(
                f"Property {property_id} moved off the lifecycle: {current.value} -> {target.value}"
            )

        await self.property_repo.set_status(property_id, target)
        logger.info(f"Property {property_id} marked {target.value}")
