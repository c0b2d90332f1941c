"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, listing filters, and validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid
from app.models.property import PropertyStatus


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Sunny 3BR family home"]
    )

    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Detailed property description"
    )

    property_type: Optional[str] = Field(
        None,
        max_length=50,
        description="Property type, e.g. house, condo, land",
        examples=["house"]
    )

    price: Decimal = Field(
        ...,
        gt=0,
        description="Asking price",
        examples=[300000]
    )

    address: str = Field(..., min_length=1, max_length=255, examples=["12 Oak Street"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Springfield"])
    state: Optional[str] = Field(None, max_length=100, examples=["IL"])
    zip_code: Optional[str] = Field(None, max_length=20, examples=["62701"])

    bedrooms: Optional[int] = Field(None, ge=0, le=100, description="Number of bedrooms")
    bathrooms: Optional[Decimal] = Field(None, ge=0, le=100, description="Number of bathrooms")
    square_feet: Optional[int] = Field(None, gt=0, description="Living area in square feet")
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator('title', 'address', 'city')
    @classmethod
    def validate_required_text(cls, v):
        """Strip and reject blank text."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v > Decimal('9999999999.99'):
            raise ValueError("Price exceeds maximum allowed value")
        return v


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""

    seller_id: Optional[uuid.UUID] = Field(
        None,
        description="Owner of the listing; only administrators may set it"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Sunny 3BR family home",
                "description": "Quiet street, renovated kitchen, large garden.",
                "property_type": "house",
                "price": 300000,
                "address": "12 Oak Street",
                "city": "Springfield",
                "state": "IL",
                "zip_code": "62701",
                "bedrooms": 3,
                "bathrooms": 2,
                "square_feet": 1800
            }
        }


class PropertyUpdate(BaseModel):
    """
    Schema for updating an existing property.
    Omitted fields are left unchanged.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    property_type: Optional[str] = Field(None, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[Decimal] = Field(None, ge=0, le=100)
    square_feet: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, max_length=500)
    status: Optional[PropertyStatus] = Field(
        None,
        description="Direct status override; normally driven by sales"
    )

    @model_validator(mode='after')
    def validate_at_least_one_field(self):
        """Ensure at least one field is provided for update."""
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class SellerContact(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class PropertyResponse(BaseModel):
    """Schema for property response data including seller contact details."""

    id: str
    seller_id: str
    title: str
    description: Optional[str] = None
    property_type: Optional[str] = None
    price: float
    address: str
    city: str
    state: Optional[str] = None
    zip_code: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    image_url: Optional[str] = None
    status: PropertyStatus
    created_at: Optional[datetime] = None
    seller: Optional[SellerContact] = None


class PropertySearchParams(BaseModel):
    """Query parameters accepted by the property listing."""

    status: Optional[PropertyStatus] = Field(None, description="Filter by availability status")
    city: Optional[str] = Field(None, max_length=100, description="Case-insensitive partial city match")
    min_price: Optional[Decimal] = Field(None, ge=0, description="Minimum price")
    max_price: Optional[Decimal] = Field(None, ge=0, description="Maximum price")
    property_type: Optional[str] = Field(None, max_length=50, description="Exact property type")

    @model_validator(mode='after')
    def validate_price_range(self):
        """Validate that min_price is not greater than max_price."""
        if self.min_price is not None and self.max_price is not None:
            if self.min_price > self.max_price:
                raise ValueError("Minimum price cannot be greater than maximum price")
        return self


class PropertyCreatedResponse(BaseModel):
    message: str = Field(..., examples=["Property created successfully"])
    property_id: str


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Property updated successfully"])
