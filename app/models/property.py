"""
Property model for marketplace listings.
Handles property data, pricing, availability status and seller ownership.
"""

from sqlalchemy import String, Text, Integer, Numeric, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
from typing import Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from app.models.user import User


class PropertyStatus(str, enum.Enum):
    """Availability status of a listing."""
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"

    def can_transition_to(self, target: "PropertyStatus") -> bool:
        """Check whether the lifecycle allows moving to the target status."""
        return target in PROPERTY_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not PROPERTY_TRANSITIONS[self]


# available -> pending -> sold, and pending -> available when a sale is cancelled
PROPERTY_TRANSITIONS = {
    PropertyStatus.AVAILABLE: frozenset({PropertyStatus.PENDING}),
    PropertyStatus.PENDING: frozenset({PropertyStatus.SOLD, PropertyStatus.AVAILABLE}),
    PropertyStatus.SOLD: frozenset(),
}


class Property(Base):
    """
    Property model for listings offered by sellers.
    Status is driven by the sale lifecycle; descriptive fields are owner-editable.
    """

    __tablename__ = "properties"

    # Ownership
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the seller who owns this property"
    )

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Detailed property description"
    )

    property_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        index=True,
        comment="Property type, e.g. house, condo, land"
    )

    # Pricing information
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Asking price"
    )

    # Location information
    address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Street address"
    )

    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="City"
    )

    state: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="State or region"
    )

    zip_code: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="Postal code"
    )

    # Property specifications
    bedrooms: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Number of bedrooms"
    )

    bathrooms: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=4, scale=1),
        nullable=True,
        comment="Number of bathrooms (half baths allowed)"
    )

    square_feet: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Living area in square feet"
    )

    image_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Reference to the listing image"
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True,
        comment="Availability status driven by the sale lifecycle"
    )

    # Relationships
    seller: Mapped["User"] = relationship(
        "User",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, status={self.status})>"

    @property
    def is_available(self) -> bool:
        return self.status == PropertyStatus.AVAILABLE

    def to_dict(self, include_seller: bool = True) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_seller: Whether to include seller contact information

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "seller_id": str(self.seller_id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type,
            "price": float(self.price),
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "bedrooms": self.bedrooms,
            "bathrooms": float(self.bathrooms) if self.bathrooms is not None else None,
            "square_feet": self.square_feet,
            "image_url": self.image_url,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_seller and self.seller:
            result["seller"] = {
                "first_name": self.seller.first_name,
                "last_name": self.seller.last_name,
                "email": self.seller.email,
                "phone": self.seller.phone,
            }

        return result


# Composite index for the public listing filters
status_city_price_index = Index(
    'idx_properties_status_city_price',
    Property.status,
    Property.city,
    Property.price
)

# Composite index for a seller's own listings
seller_status_index = Index(
    'idx_properties_seller_status',
    Property.seller_id,
    Property.status
)
