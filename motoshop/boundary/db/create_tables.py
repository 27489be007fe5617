"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, motoshop.configs
System role: Database schema initialization

Usage:
    python -m motoshop.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from motoshop.boundary.db.base import Base
from motoshop.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from motoshop.boundary.db.models import (  # noqa: F401
    JobModel,
    ProfileModel,
    QuickNoteModel,
    ShopMembershipModel,
    ShopModel,
)

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use, defaults to a new engine from settings
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


if __name__ == "__main__":
    asyncio.run(create_all_tables())
