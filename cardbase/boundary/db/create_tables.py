"""
Database table creation script.

Creates the pg_trgm extension and all tables defined in ORM models using
SQLAlchemy metadata.

Dependencies: sqlalchemy, cardbase.configs
System role: Database schema initialization

Usage:
    python -m cardbase.boundary.db.create_tables
    python -m cardbase.boundary.db.create_tables --drop
"""

import argparse
import asyncio
import logging

from sqlalchemy import text

from cardbase.boundary.db.base import Base
from cardbase.boundary.db.connection import dispose_engine, get_async_engine

# Import all models to register them with Base.metadata
from cardbase.boundary.db.models import CardCollisionModel, CardModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create the trigram extension and all database tables.

    Idempotent: CREATE EXTENSION IF NOT EXISTS and CREATE TABLE IF NOT
    EXISTS for each model, so safe to run multiple times.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("All tables created successfully")


async def drop_all_tables() -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    Vector index entries are not touched; run the reconcile script afterwards.
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All tables dropped")


async def _main(drop: bool) -> None:
    try:
        if drop:
            await drop_all_tables()
        await create_all_tables()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Create the card metadata schema")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()
    asyncio.run(_main(args.drop))
