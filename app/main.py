"""
Application entry point: logging, lifespan, routers and the error envelope.

Run with ``uvicorn app.main:app`` or ``python -m app.main``.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config import settings
from app.database import test_database_connection, create_tables, close_db_connection
from app.routers import (
    auth_router,
    properties_router,
    sales_router,
    payments_router,
    users_router
)
from app.utils.exceptions import APIException
from app.services.error_handler import ErrorHandlerService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and dispose of the engine on shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")
    if settings.is_production and settings.uses_default_secret:
        logger.warning("JWT_SECRET_KEY is the placeholder value; set a real secret")

    db_connected = await test_database_connection()
    if db_connected:
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Marketplace API for listing properties and selling them to buyers.

    ## Features

    * **Listings**: Sellers publish properties; anyone can browse and filter them
    * **Sales**: Buyers start sales; completing or cancelling a sale drives the property status
    * **Payments**: Participants record payments against a sale; admins settle them
    * **Administration**: User listing, role management and statistics

    ## Authentication

    Use `/api/v1/auth/register` or `/api/v1/auth/login` to obtain a JWT token,
    then include it in the Authorization header as `Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and current user"},
        {"name": "Properties", "description": "Property listings and their availability"},
        {"name": "Sales", "description": "Sales of properties between buyers and sellers"},
        {"name": "Payments", "description": "Payments recorded against sales"},
        {"name": "Users", "description": "User administration"},
        {"name": "Health", "description": "Service and database health"}
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

for router in (auth_router, properties_router, sales_router, payments_router, users_router):
    app.include_router(router, prefix=settings.api_v1_prefix)


# Starlette picks the handler of the closest class in the exception MRO.
ERROR_HANDLERS = (
    (APIException, ErrorHandlerService.handle_api_exception),
    (RequestValidationError, ErrorHandlerService.handle_validation_error),
    (SQLAlchemyError, ErrorHandlerService.handle_database_error),
    (StarletteHTTPException, ErrorHandlerService.handle_http_exception),
    (Exception, ErrorHandlerService.handle_unexpected_error),
)


def _delegate(handler):
    async def exception_handler(request: Request, exc: Exception):
        return handler(exc, request)
    return exception_handler


for exc_class, handler in ERROR_HANDLERS:
    app.add_exception_handler(exc_class, _delegate(handler))


@app.get("/", tags=["Health"])
async def root():
    """Service name, version and where to find the docs."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus a database round trip; 503 when the database is unreachable."""
    db_healthy = await test_database_connection()

    if not db_healthy:
        logger.error("Health check failed: database unreachable")
        raise HTTPException(
            status_code=503,
            detail="Database connection failed"
        )

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
