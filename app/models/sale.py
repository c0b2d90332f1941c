"""
Sale model for property transactions between buyers and sellers.
"""

from sqlalchemy import Text, Numeric, Date, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from datetime import date
from decimal import Decimal
from typing import Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property


class SaleStatus(str, enum.Enum):
    """Sale lifecycle status. A sale starts pending."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self != SaleStatus.PENDING


class Sale(Base):
    """
    Sale of a property to a buyer.
    Completing or cancelling a sale drives the status of its property.
    """

    __tablename__ = "sales"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Property being sold"
    )

    buyer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Buying user"
    )

    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Selling user"
    )

    sale_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Agreed sale price"
    )

    commission: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0"),
        comment="Commission on the sale"
    )

    sale_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Date the sale was agreed"
    )

    status: Mapped[SaleStatus] = mapped_column(
        SQLEnum(SaleStatus),
        nullable=False,
        default=SaleStatus.PENDING,
        index=True,
        comment="Sale lifecycle status"
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # Relationships
    property_rel: Mapped["Property"] = relationship("Property", lazy="selectin")
    buyer: Mapped["User"] = relationship("User", foreign_keys=[buyer_id], lazy="selectin")
    seller: Mapped["User"] = relationship("User", foreign_keys=[seller_id], lazy="selectin")

    def __repr__(self) -> str:
        return f"<Sale(id={self.id}, property_id={self.property_id}, status={self.status})>"

    def to_dict(self, include_parties: bool = True) -> dict:
        """
        Convert sale to dictionary.

        Args:
            include_parties: Whether to include property and participant details

        Returns:
            Dictionary representation of sale
        """
        result = {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "buyer_id": str(self.buyer_id),
            "seller_id": str(self.seller_id),
            "sale_price": float(self.sale_price),
            "commission": float(self.commission),
            "sale_date": self.sale_date.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_parties:
            if self.property_rel:
                result.update({
                    "property_title": self.property_rel.title,
                    "address": self.property_rel.address,
                    "city": self.property_rel.city,
                    "state": self.property_rel.state,
                })
            if self.buyer:
                result.update({
                    "buyer_first_name": self.buyer.first_name,
                    "buyer_last_name": self.buyer.last_name,
                    "buyer_email": self.buyer.email,
                })
            if self.seller:
                result.update({
                    "seller_first_name": self.seller.first_name,
                    "seller_last_name": self.seller.last_name,
                    "seller_email": self.seller.email,
                })

        return result


# Index for completed-sales reporting by date
status_date_index = Index(
    'idx_sales_status_date',
    Sale.status,
    Sale.sale_date
)
