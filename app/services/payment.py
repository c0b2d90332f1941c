"""
Payment service for recording and reviewing payments made against sales.
"""

from typing import List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.payment import PaymentRepository
from app.repositories.sale import SaleRepository
from app.models.payment import Payment, PaymentStatus
from app.models.sale import Sale
from app.schemas.payment import PaymentCreate
from app.services.authorization import Actor, Operation, OwnershipFacts, authorize
from app.utils.exceptions import APIException, InternalError, SaleNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment ledger. Sale participants record and read payments; admins settle them.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.payment_repo = PaymentRepository(db_session)
        self.sale_repo = SaleRepository(db_session)

    async def create_payment(self, payment_data: PaymentCreate, actor: Actor) -> Payment:
        """
        Record a payment against a sale.

        The amount is stored as given; it is not checked against the sale price.

        Raises:
            SaleNotFoundError: If sale doesn't exist
            InsufficientPermissionsError: If the actor is not a participant
        """
        sale = await self._load_sale(payment_data.sale_id)
        authorize(Operation.CREATE_PAYMENT, actor, OwnershipFacts.for_sale(sale))

        try:
            create_data = payment_data.model_dump()
            create_data["payment_date"] = payment_data.payment_date or date.today()
            create_data["status"] = PaymentStatus.PENDING

            payment = await self.payment_repo.create(create_data)

            logger.info(f"Payment recorded by {actor.email}: {payment.id} on sale {sale.id} ({payment.amount})")
            return payment

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create payment for sale {payment_data.sale_id}: {e}", exc_info=True)
            raise InternalError("Failed to create payment")

    async def update_payment_status(
        self,
        payment_id: uuid.UUID,
        status: PaymentStatus,
        notes: Optional[str],
        actor: Actor
    ) -> None:
        """
        Settle a payment. Unknown payment ids are accepted and change nothing.

        Raises:
            InsufficientPermissionsError: If the actor is not an admin
        """
        authorize(Operation.UPDATE_PAYMENT_STATUS, actor)

        try:
            updated = await self.payment_repo.update_status(payment_id, status, notes)
            if updated:
                logger.info(f"Payment {payment_id} set to {status.value} by {actor.email}")
            else:
                logger.debug(f"Payment status update for unknown payment {payment_id}")
        except Exception as e:
            logger.error(f"Failed to update payment {payment_id}: {e}", exc_info=True)
            raise InternalError("Failed to update payment")

    async def list_sale_payments(self, sale_id: uuid.UUID, actor: Actor) -> List[Payment]:
        """
        List the payments of a sale, most recent payment date first.

        Raises:
            SaleNotFoundError: If sale doesn't exist
            InsufficientPermissionsError: If the actor is not a participant
        """
        sale = await self._load_sale(sale_id)
        authorize(Operation.VIEW_PAYMENTS, actor, OwnershipFacts.for_sale(sale))

        try:
            return await self.payment_repo.list_by_sale(sale_id)
        except Exception as e:
            logger.error(f"Failed to list payments for sale {sale_id}: {e}", exc_info=True)
            raise InternalError("Failed to list payments")

    async def list_all_payments(self, actor: Actor) -> List[Payment]:
        """
        List every payment with its sale details.

        Raises:
            InsufficientPermissionsError: If the actor is not an admin
        """
        authorize(Operation.LIST_PAYMENTS, actor)

        try:
            return await self.payment_repo.list_all()
        except Exception as e:
            logger.error(f"Failed to list payments: {e}", exc_info=True)
            raise InternalError("Failed to list payments")

    async def _load_sale(self, sale_id: uuid.UUID) -> Sale:
        try:
            sale = await self.sale_repo.get_by_id(sale_id)
        except Exception as e:
            logger.error(f"Failed to get sale {sale_id}: {e}", exc_info=True)
            raise InternalError("Failed to retrieve sale")

        if not sale:
            raise SaleNotFoundError(str(sale_id))
        return sale
