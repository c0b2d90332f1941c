"""
Property repository for managing listings with filtering and status updates.
Status writes here never commit; the sale workflow owns that transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, desc
from app.repositories.base import BaseRepository
from app.models.property import Property, PropertyStatus
from typing import Optional, List, Dict, Any
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Optional listing filters; unset ones match everything."""

    def __init__(
        self,
        status: Optional[PropertyStatus] = None,
        city: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        property_type: Optional[str] = None,
        seller_id: Optional[uuid.UUID] = None
    ):
        self.status = status
        self.city = city
        self.min_price = min_price
        self.max_price = max_price
        self.property_type = property_type
        self.seller_id = seller_id


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Seller contact details come with every property through the selectin relationship.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property listing in status available.

        Args:
            property_data: Listing fields; any status passed in is ignored

        Returns:
            The new listing
        """
        try:
            property_data = {**property_data, "status": PropertyStatus.AVAILABLE}
            created_property = await self.create(property_data)
            logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
            return created_property
        except Exception as e:
            logger.error(f"Failed to create property: {e}")
            raise

    async def list_properties(self, filters: PropertySearchFilters) -> List[Property]:
        """
        List properties matching the filters, newest first.

        Args:
            filters: Criteria to apply
        """
        try:
            query = select(Property)

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(desc(Property.created_at))

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property listing returned {len(properties)} results")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        conditions = []

        if filters.status is not None:
            conditions.append(Property.status == filters.status)

        # City filter (case-insensitive partial match)
        if filters.city:
            conditions.append(Property.city.ilike(f"%{filters.city}%"))

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.property_type:
            conditions.append(Property.property_type == filters.property_type)

        if filters.seller_id:
            conditions.append(Property.seller_id == filters.seller_id)

        return conditions

    async def get_for_update(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Load a property and lock its row until the current transaction ends.

        Args:
            property_id: UUID of the property

        Returns:
            Property instance if found, None otherwise
        """
        query = (
            select(Property)
            .where(Property.id == property_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def compare_and_set_status(
        self,
        property_id: uuid.UUID,
        expected: PropertyStatus,
        new_status: PropertyStatus
    ) -> bool:
        """
        Set the status only if the row currently holds the expected status.

        Args:
            property_id: UUID of the property
            expected: Status the row must have
            new_status: Status to write

        Returns:
            True if a row was updated, False otherwise
        """
        stmt = (
            update(Property)
            .where(and_(Property.id == property_id, Property.status == expected))
            .values(status=new_status)
        )
        result = await self.db.execute(stmt)
        updated = result.rowcount > 0
        logger.debug(
            f"Property {property_id} {expected.value} -> {new_status.value}: "
            f"{'applied' if updated else 'no match'}"
        )
        return updated

    async def set_status(self, property_id: uuid.UUID, new_status: PropertyStatus) -> bool:
        """
        Set the status unconditionally.

        Returns:
            True if the property exists, False otherwise
        """
        stmt = update(Property).where(Property.id == property_id).values(status=new_status)
        result = await self.db.execute(stmt)
        return result.rowcount > 0
