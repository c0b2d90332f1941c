"""
Marketplace settings, read from the environment or a ``.env`` file.

DATABASE_URL may name plain ``postgresql://`` or ``sqlite://``; the async
driver is filled in here so the engine always gets asyncpg or aiosqlite.
"""

from pydantic import validator
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
ALLOWED_ENVIRONMENTS = ("development", "testing", "staging", "production")
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


class Settings(BaseSettings):

    app_name: str = "Real Estate Marketplace API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/real_estate"

    # Access tokens only, valid for a day
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Set false to refuse role=admin on public registration
    allow_admin_self_registration: bool = True

    api_v1_prefix: str = "/api/v1"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8080", "http://localhost:8000"]

    host: str = "0.0.0.0"
    port: int = 8000

    @validator("database_url", pre=True)
    def validate_database_url(cls, v):
        """Rewrite sync URLs to their async driver; reject anything else."""
        if not v:
            raise ValueError("DATABASE_URL is required")

        for sync_prefix, async_prefix in ASYNC_DRIVERS.items():
            if v.startswith(sync_prefix):
                return async_prefix + v[len(sync_prefix):]

        if not v.startswith(tuple(ASYNC_DRIVERS.values())):
            raise ValueError("DATABASE_URL must use the asyncpg or aiosqlite driver")
        return v

    @validator("jwt_secret_key", pre=True)
    def validate_jwt_secret_key(cls, v):
        """A custom secret must be at least 32 characters; the placeholder is let through for local runs."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if v != DEFAULT_JWT_SECRET and len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @validator("environment")
    def validate_environment(cls, v):
        if v not in ALLOWED_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {list(ALLOWED_ENVIRONMENTS)}")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.testing or self.environment == "testing"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret_key == DEFAULT_JWT_SECRET

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
