"""
Access token issue and verification.

Tokens are HS256 JWTs carrying the user id (``sub``), email, role, type,
issue time and expiry. There are no refresh tokens; a token lives for
``ACCESS_TOKEN_EXPIRE_MINUTES`` (24 hours by default).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, ExpiredSignatureError, jwt
from app.config import settings
from app.models.user import UserRole
import uuid

ACCESS_TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ("sub", "email", "role", "exp")


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims of an access token."""

    user_id: str
    email: str
    role: UserRole
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "TokenPayload":
        missing = [name for name in REQUIRED_CLAIMS if not claims.get(name)]
        if missing:
            raise JWTError(f"Token is missing claims: {', '.join(missing)}")

        try:
            role = UserRole(claims["role"])
        except ValueError:
            raise JWTError(f"Unknown role claim: {claims['role']}")

        return cls(
            user_id=claims["sub"],
            email=claims["email"],
            role=role,
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        )


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue an access token for a user.

    Args:
        user_id: Id stored as the subject
        email: User's email address
        role: Role the token grants
        expires_delta: Lifetime override, mainly for tests

    Returns:
        Encoded JWT
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role.value,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> TokenPayload:
    """
    Decode a token and check its signature, expiry, type and claims.

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is malformed, forged, of another type or lacks claims
    """
    claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

    if claims.get("type") != token_type:
        raise JWTError(f"Expected a {token_type} token")

    return TokenPayload.from_claims(claims)


__all__ = [
    "TokenPayload",
    "create_access_token",
    "verify_token",
    "ExpiredSignatureError",
]
