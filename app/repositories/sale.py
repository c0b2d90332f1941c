"""
Sale repository for property transactions and sales reporting.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, desc, extract
from app.repositories.base import BaseRepository
from app.models.sale import Sale, SaleStatus
from app.models.user import UserRole
from decimal import Decimal
from typing import List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class SaleRepository(BaseRepository[Sale]):
    """
    Repository for sales.
    Property and participant details are loaded through selectin relationships.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Sale, db)

    async def list_for_user(self, user_id: uuid.UUID, role: UserRole) -> List[Sale]:
        """
        List the sales visible to a user, newest first.

        Admins see every sale, sellers the sales they sell and buyers the
        sales they buy.

        Args:
            user_id: UUID of the requesting user
            role: Role of the requesting user

        Returns:
            List of sales
        """
        try:
            query = select(Sale)

            if role == UserRole.SELLER:
                query = query.where(Sale.seller_id == user_id)
            elif role == UserRole.BUYER:
                query = query.where(Sale.buyer_id == user_id)

            query = query.order_by(desc(Sale.created_at))

            result = await self.db.execute(query)
            sales = result.scalars().all()

            logger.debug(f"Retrieved {len(sales)} sales for {role.value} {user_id}")
            return list(sales)
        except Exception as e:
            logger.error(f"Failed to list sales for user {user_id}: {e}")
            raise

    async def get_sale_statistics(self, year: int) -> Dict[str, Any]:
        """
        Aggregate sales for the admin dashboard.

        Args:
            year: Calendar year for the monthly breakdown

        Returns:
            Dictionary with total_sales, total_value, pending_sales and monthly_sales
        """
        try:
            completed_query = select(
                func.count(Sale.id),
                func.coalesce(func.sum(Sale.sale_price), 0)
            ).where(Sale.status == SaleStatus.COMPLETED)
            completed_result = await self.db.execute(completed_query)
            total_sales, total_value = completed_result.one()

            pending_sales = await self.count({"status": SaleStatus.PENDING})

            month = extract("month", Sale.sale_date)
            monthly_query = (
                select(
                    month.label("month"),
                    func.count(Sale.id),
                    func.coalesce(func.sum(Sale.sale_price), 0)
                )
                .where(
                    and_(
                        Sale.status == SaleStatus.COMPLETED,
                        extract("year", Sale.sale_date) == year
                    )
                )
                .group_by(month)
                .order_by(month)
            )
            monthly_result = await self.db.execute(monthly_query)
            monthly_sales = [
                {
                    "month": int(row[0]),
                    "count": row[1],
                    "total_value": float(Decimal(str(row[2])))
                }
                for row in monthly_result.all()
            ]

            statistics = {
                "total_sales": total_sales,
                "total_value": float(Decimal(str(total_value))),
                "pending_sales": pending_sales,
                "monthly_sales": monthly_sales
            }

            logger.debug("Generated sale statistics")
            return statistics
        except Exception as e:
            logger.error(f"Failed to get sale statistics: {e}")
            raise
