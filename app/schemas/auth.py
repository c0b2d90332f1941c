"""
Pydantic schemas for authentication requests and responses.
Handles registration, login and current-user data validation.
"""

from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from app.models.user import UserRole, MIN_PASSWORD_LENGTH
from app.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["jane@example.com"])
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description="Password (minimum 8 characters)",
        examples=["securepassword123"]
    )
    first_name: str = Field(..., min_length=1, max_length=100, examples=["Jane"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Doe"])
    phone: Optional[str] = Field(None, max_length=30, examples=["+1-555-0100"])
    role: UserRole = Field(
        default=UserRole.BUYER,
        description="Marketplace role, buyer by default",
        examples=["seller"]
    )

    @validator('email')
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @validator('first_name', 'last_name')
    def validate_name(cls, v):
        """Validate and clean names."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "password": "securepassword123",
                "first_name": "Jane",
                "last_name": "Doe",
                "phone": "+1-555-0100",
                "role": "seller"
            }
        }


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["jane@example.com"])
    password: str = Field(..., min_length=1, max_length=128, description="User's password")

    @validator('email')
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AuthUser(BaseModel):
    """User summary returned alongside a token."""

    id: str
    email: EmailStr
    first_name: str
    last_name: str
    role: UserRole


class AuthResponse(BaseModel):
    """Register and login response schema."""

    message: str = Field(..., examples=["Login successful"])
    token: str = Field(
        ...,
        description="JWT access token, valid for 24 hours",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    user: AuthUser


class CurrentUserResponse(BaseModel):
    """Current user information response schema."""

    user: UserResponse
