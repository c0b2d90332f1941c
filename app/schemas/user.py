"""
Pydantic schemas for user management requests and responses.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Dict
from datetime import datetime
from app.models.user import UserRole


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(
        ...,
        description="User's unique identifier",
        examples=["123e4567-e89b-12d3-a456-426614174000"]
    )
    email: EmailStr = Field(..., description="User's email address", examples=["jane@example.com"])
    first_name: str = Field(..., examples=["Jane"])
    last_name: str = Field(..., examples=["Doe"])
    phone: Optional[str] = Field(None, examples=["+1-555-0100"])
    role: UserRole = Field(..., description="User's role", examples=["buyer"])
    created_at: Optional[datetime] = Field(None, description="Account creation timestamp")


class RoleUpdateRequest(BaseModel):
    """
    Role change request.

    The role is a plain string so unknown values reach the service and are
    rejected there as a bad request.
    """

    role: str = Field(..., description="New role: buyer, seller or admin", examples=["seller"])


class RoleUpdateResponse(BaseModel):
    message: str = Field(..., examples=["User role updated successfully"])


class UserStatsResponse(BaseModel):
    """User statistics for the admin dashboard."""

    total_users: int = Field(..., description="Total number of users")
    users_by_role: Dict[str, int] = Field(..., description="User count per role")
    recent_users: int = Field(..., description="Users registered in the last 30 days")

    class Config:
        json_schema_extra = {
            "example": {
                "total_users": 42,
                "users_by_role": {"buyer": 30, "seller": 10, "admin": 2},
                "recent_users": 7
            }
        }
