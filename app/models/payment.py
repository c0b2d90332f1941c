"""
Payment model for money recorded against a sale.
"""

from sqlalchemy import String, Text, Numeric, Date, Enum as SQLEnum, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from datetime import date
from decimal import Decimal
from typing import Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from app.models.sale import Sale


class PaymentStatus(str, enum.Enum):
    """Payment processing status, updated by administrators."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Base):
    """Payment recorded against a sale. A sale may have any number of payments."""

    __tablename__ = "payments"

    sale_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sales.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Sale this payment belongs to"
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Payment amount"
    )

    payment_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Payment type, e.g. deposit or installment"
    )

    payment_method: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Payment method, e.g. wire or check"
    )

    payment_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True
    )

    transaction_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="External transaction reference"
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True
    )

    sale: Mapped["Sale"] = relationship("Sale", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, sale_id={self.sale_id}, amount={self.amount})>"

    def to_dict(self, include_sale: bool = False) -> dict:
        """
        Convert payment to dictionary.

        Args:
            include_sale: Whether to include sale, property and buyer details

        Returns:
            Dictionary representation of payment
        """
        result = {
            "id": str(self.id),
            "sale_id": str(self.sale_id),
            "amount": float(self.amount),
            "payment_type": self.payment_type,
            "payment_method": self.payment_method,
            "payment_date": self.payment_date.isoformat(),
            "transaction_id": self.transaction_id,
            "notes": self.notes,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_sale and self.sale:
            result["sale_price"] = float(self.sale.sale_price)
            if self.sale.property_rel:
                result["property_title"] = self.sale.property_rel.title
                result["address"] = self.sale.property_rel.address
            if self.sale.buyer:
                result["buyer_first_name"] = self.sale.buyer.first_name
                result["buyer_last_name"] = self.sale.buyer.last_name

        return result
