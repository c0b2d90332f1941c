"""
Pydantic schemas for payment requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import uuid
from app.models.payment import PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for recording a payment against a sale."""

    sale_id: uuid.UUID = Field(..., description="Sale the payment belongs to")
    amount: Decimal = Field(..., description="Payment amount", examples=[30000])
    payment_type: Optional[str] = Field(None, max_length=50, examples=["deposit"])
    payment_method: Optional[str] = Field(None, max_length=50, examples=["wire"])
    payment_date: Optional[date] = Field(None, description="Defaults to today")
    transaction_id: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=5000)


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus = Field(..., examples=["completed"])
    notes: Optional[str] = Field(None, max_length=5000)


class PaymentResponse(BaseModel):
    """Payment, optionally enriched with sale, property and buyer details."""

    id: str
    sale_id: str
    amount: float
    payment_type: Optional[str] = None
    payment_method: Optional[str] = None
    payment_date: date
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    status: PaymentStatus
    created_at: Optional[datetime] = None
    sale_price: Optional[float] = None
    property_title: Optional[str] = None
    address: Optional[str] = None
    buyer_first_name: Optional[str] = None
    buyer_last_name: Optional[str] = None


class PaymentCreatedResponse(BaseModel):
    message: str = Field(..., examples=["Payment created successfully"])
    payment_id: str
