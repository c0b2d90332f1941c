#!/usr/bin/env python3
"""
Database management script.
Creates the schema, bootstraps the first administrator and resets development databases.
"""

import asyncio
import sys
import argparse
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.config import settings
from app.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from app.models.user import UserRole
from app.repositories.user import UserRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "admin123456"


class MigrationManager:
    """Manages the database schema and its initial data."""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        logger.info("Creating database tables")
        await create_tables()

    async def seed_database(
        self,
        email: str = DEFAULT_ADMIN_EMAIL,
        password: str = DEFAULT_ADMIN_PASSWORD
    ) -> bool:
        """
        Create the administrator account unless it already exists.

        Administrators cannot register through the API, so this is how the
        first one is created.

        Returns:
            True if the account was created, False if it already existed
        """
        logger.info("Seeding database with initial data")

        async with self.session_factory() as session:
            user_repo = UserRepository(session)

            existing_admin = await user_repo.get_by_email(email)
            if existing_admin:
                logger.info(f"User {email} already exists, skipping seed")
                return False

            admin_user = await user_repo.create_user({
                "email": email,
                "password": password,
                "first_name": "System",
                "last_name": "Administrator",
                "role": UserRole.ADMIN
            })

            logger.info(f"Admin user created: {admin_user.email}")
            if password == DEFAULT_ADMIN_PASSWORD:
                logger.warning("Seeded admin uses the default password; change it in production!")
            return True

    async def reset_database(
        self,
        email: str = DEFAULT_ADMIN_EMAIL,
        password: str = DEFAULT_ADMIN_PASSWORD
    ) -> None:
        """Drop and recreate all tables, then seed the administrator."""
        logger.warning("Resetting database - all data will be lost!")

        if not settings.is_development and not settings.is_testing:
            raise RuntimeError("Database reset is only allowed in development or test mode")

        await drop_tables()
        await create_tables()
        await self.seed_database(email, password)

        logger.info("Database reset completed")


async def _run(coro) -> None:
    try:
        await coro
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Real estate marketplace database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create database tables")

    seed_parser = subparsers.add_parser("seed", help="Create the administrator account")
    seed_parser.add_argument("--email", default=DEFAULT_ADMIN_EMAIL, help="Administrator email")
    seed_parser.add_argument("--password", default=DEFAULT_ADMIN_PASSWORD, help="Administrator password")

    reset_parser = subparsers.add_parser("reset", help="Reset database (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")
    reset_parser.add_argument("--email", default=DEFAULT_ADMIN_EMAIL, help="Administrator email")
    reset_parser.add_argument("--password", default=DEFAULT_ADMIN_PASSWORD, help="Administrator password")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = MigrationManager()

    try:
        if args.command == "create":
            asyncio.run(_run(manager.create_schema()))

        elif args.command == "seed":
            asyncio.run(_run(manager.seed_database(args.email, args.password)))

        elif args.command == "reset":
            if not args.confirm:
                print("Database reset requires --confirm flag")
                return
            asyncio.run(_run(manager.reset_database(args.email, args.password)))

    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
