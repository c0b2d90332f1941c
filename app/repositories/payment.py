"""
Payment repository for the per-sale payment ledger.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, desc
from app.repositories.base import BaseRepository
from app.models.payment import Payment, PaymentStatus
from typing import Optional, List
import uuid
import logging

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository[Payment]):

    def __init__(self, db: AsyncSession):
        super().__init__(Payment, db)

    async def list_by_sale(self, sale_id: uuid.UUID) -> List[Payment]:
        """List payments of a sale, most recent payment date first."""
        try:
            query = (
                select(Payment)
                .where(Payment.sale_id == sale_id)
                .order_by(desc(Payment.payment_date), desc(Payment.created_at))
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list payments for sale {sale_id}: {e}")
            raise

    async def list_all(self) -> List[Payment]:
        """List every payment, most recent payment date first."""
        try:
            query = select(Payment).order_by(desc(Payment.payment_date), desc(Payment.created_at))
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list payments: {e}")
            raise

    async def update_status(
        self,
        payment_id: uuid.UUID,
        status: PaymentStatus,
        notes: Optional[str] = None
    ) -> int:
        """
        Update the status and notes of a payment.

        Unknown ids match no row and are not an error.

        Returns:
            Number of rows updated
        """
        try:
            values = {"status": status}
            if notes is not None:
                values["notes"] = notes

            stmt = update(Payment).where(Payment.id == payment_id).values(**values)
            result = await self.db.execute(stmt)
            await self.db.commit()

            logger.debug(f"Payment {payment_id} status update matched {result.rowcount} rows")
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update payment status {payment_id}: {e}")
            raise
