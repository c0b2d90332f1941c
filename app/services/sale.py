"""
Sale service coordinating sales with the availability of their properties.

Starting a sale reserves the property (available -> pending) in the same
transaction that records the sale. Completing a sale marks the property sold
and cancelling it puts the property back on the market.
"""

from typing import List, Dict, Any
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.sale import SaleRepository
from app.models.sale import Sale, SaleStatus
from app.schemas.sale import SaleCreate, SaleUpdate
from app.services.property import PropertyService
from app.services.authorization import (
    Actor,
    Operation,
    OwnershipFacts,
    authorize,
    resolve_buyer_id
)
from app.utils.exceptions import (
    APIException,
    InternalError,
    SaleNotFoundError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class SaleService:
    """
    Sale service for the sale lifecycle, scoped listings and reporting.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.sale_repo = SaleRepository(db_session)
        self.property_service = PropertyService(db_session)

    async def create_sale(self, sale_data: SaleCreate, actor: Actor) -> Sale:
        """
        Start a sale on an available property.

        The property row is locked, moved to pending with a compare-and-set
        update, and the sale is inserted; both writes commit together.

        Args:
            sale_data: Sale creation data
            actor: Buyer or admin starting the sale

        Returns:
            Created sale in status pending

        Raises:
            InsufficientPermissionsError: If the actor is a seller
            PropertyNotAvailableError: If the property is missing or not available
            ValidationError: If seller_id does not own the property
        """
        authorize(Operation.CREATE_SALE, actor)

        try:
            property_obj = await self.property_service.lock_property(sale_data.property_id)

            seller_id = sale_data.seller_id or property_obj.seller_id
            if seller_id != property_obj.seller_id:
                raise ValidationError("Seller does not own this property")

            await self.property_service.mark_pending(property_obj.id)

            sale = await self.sale_repo.create(
                {
                    "property_id": property_obj.id,
                    "buyer_id": resolve_buyer_id(actor, sale_data.buyer_id),
                    "seller_id": seller_id,
                    "sale_price": sale_data.sale_price,
                    "commission": sale_data.commission,
                    "sale_date": sale_data.sale_date or date.today(),
                    "status": SaleStatus.PENDING,
                    "notes": sale_data.notes,
                },
                commit=False
            )
            await self.db.commit()

            logger.info(f"Sale created by {actor.email}: {sale.id} for property {property_obj.id}")
            return sale

        except APIException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create sale for property {sale_data.property_id}: {e}", exc_info=True)
            raise InternalError("Failed to create sale")

    async def get_sale(self, sale_id: uuid.UUID, actor: Actor) -> Sale:
        """
        Get a sale as one of its participants or an admin.

        Raises:
            SaleNotFoundError: If sale doesn't exist
            InsufficientPermissionsError: If the actor is not a participant
        """
        sale = await self._load_sale(sale_id)
        authorize(Operation.VIEW_SALE, actor, OwnershipFacts.for_sale(sale))
        return sale

    async def update_sale(self, sale_id: uuid.UUID, sale_data: SaleUpdate, actor: Actor) -> Sale:
        """
        Change the status of a sale and apply its effect on the property.

        completed marks the property sold, cancelled marks it available and
        pending leaves it unchanged.

        Raises:
            SaleNotFoundError: If sale doesn't exist
            InsufficientPermissionsError: If the actor is not a participant
        """
        sale = await self._load_sale(sale_id)
        authorize(Operation.UPDATE_SALE, actor, OwnershipFacts.for_sale(sale))

        try:
            previous = sale.status
            new_status = sale_data.status

            if previous.is_terminal and new_status != previous:
                logger.warning(f"Sale {sale_id} reopened by {actor.email}: {previous.value} -> {new_status.value}")

            update_data: Dict[str, Any] = {"status": new_status}
            if sale_data.notes is not None:
                update_data["notes"] = sale_data.notes

            await self.sale_repo.update(sale_id, update_data, commit=False)

            if new_status == SaleStatus.COMPLETED:
                await self.property_service.mark_sold(sale.property_id)
            elif new_status == SaleStatus.CANCELLED:
                await self.property_service.mark_available(sale.property_id)

            await self.db.commit()

            logger.info(f"Sale {sale_id} updated by {actor.email}: {previous.value} -> {new_status.value}")
            return await self._load_sale(sale_id)

        except APIException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update sale {sale_id}: {e}", exc_info=True)
            raise InternalError("Failed to update sale")

    async def list_sales(self, actor: Actor) -> List[Sale]:
        """
        List the sales visible to the actor, newest first.

        Admins see all sales, sellers their own sales and buyers their own purchases.
        """
        try:
            return await self.sale_repo.list_for_user(actor.id, actor.role)
        except Exception as e:
            logger.error(f"Failed to list sales for {actor.email}: {e}", exc_info=True)
            raise InternalError("Failed to list sales")

    async def get_sale_statistics(self, actor: Actor) -> Dict[str, Any]:
        """
        Aggregate completed and pending sales for the admin dashboard.

        Raises:
            InsufficientPermissionsError: If the actor is not an admin
        """
        authorize(Operation.VIEW_SALE_STATS, actor)

        try:
            return await self.sale_repo.get_sale_statistics(date.today().year)
        except Exception as e:
            logger.error(f"Failed to compute sale statistics: {e}", exc_info=True)
            raise InternalError("Failed to compute sale statistics")

    async def _load_sale(self, sale_id: uuid.UUID) -> Sale:
        try:
            sale = await self.sale_repo.get_by_id(sale_id)
        except Exception as e:
            logger.error(f"Failed to get sale {sale_id}: {e}", exc_info=True)
            raise InternalError("Failed to retrieve sale")

        if not sale:
            raise SaleNotFoundError(str(sale_id))
        return sale
