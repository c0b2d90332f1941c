"""
Pydantic schemas for sale requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
import uuid
from app.models.sale import SaleStatus


class SaleCreate(BaseModel):
    """Schema for starting a sale on an available property."""

    property_id: uuid.UUID = Field(..., description="Property being bought")
    buyer_id: Optional[uuid.UUID] = Field(
        None,
        description="Buyer of the sale; only administrators may set it"
    )
    seller_id: Optional[uuid.UUID] = Field(
        None,
        description="Seller of the sale; defaults to the property's seller"
    )
    sale_price: Decimal = Field(..., gt=0, description="Agreed sale price", examples=[300000])
    commission: Decimal = Field(default=Decimal("0"), ge=0, description="Commission on the sale")
    sale_date: Optional[date] = Field(None, description="Date of the sale; defaults to today")
    notes: Optional[str] = Field(None, max_length=5000)

    class Config:
        json_schema_extra = {
            "example": {
                "property_id": "123e4567-e89b-12d3-a456-426614174000",
                "sale_price": 300000,
                "commission": 9000,
                "sale_date": "2024-05-01",
                "notes": "Cash offer"
            }
        }


class SaleUpdate(BaseModel):
    """Schema for moving a sale through its lifecycle."""

    status: SaleStatus = Field(..., description="New sale status", examples=["completed"])
    notes: Optional[str] = Field(None, max_length=5000, description="Replaces notes when provided")


class SaleResponse(BaseModel):
    """Sale with property and participant details."""

    id: str
    property_id: str
    buyer_id: str
    seller_id: str
    sale_price: float
    commission: float
    sale_date: date
    status: SaleStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    property_title: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    buyer_first_name: Optional[str] = None
    buyer_last_name: Optional[str] = None
    buyer_email: Optional[str] = None
    seller_first_name: Optional[str] = None
    seller_last_name: Optional[str] = None
    seller_email: Optional[str] = None


class SaleCreatedResponse(BaseModel):
    message: str = Field(..., examples=["Sale created successfully"])
    sale_id: str


class MonthlySales(BaseModel):
    month: int = Field(..., ge=1, le=12)
    count: int
    total_value: float


class SaleStatsResponse(BaseModel):
    """Sales statistics for the admin dashboard."""

    total_sales: int = Field(..., description="Number of completed sales")
    total_value: float = Field(..., description="Sum of completed sale prices")
    pending_sales: int = Field(..., description="Number of pending sales")
    monthly_sales: List[MonthlySales] = Field(
        ...,
        description="Completed sales per month of the current year"
    )
