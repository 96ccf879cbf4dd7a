"""
Create the landing tables in a development database.

Production landing tables and transform procedures are managed by the
database itself; this only gives a local Postgres the same staging shape.
"""

import asyncio
import logging

from core.config import Settings
from core.database import create_engine
from models.base import ImportKind, metadata
from models.landing import landing_table

logger = logging.getLogger(__name__)


async def init_database(config: Settings):
    logger.info("Connecting to database...")
    engine = create_engine(config)

    # Register the configured names (they may differ from the defaults)
    tables = [
        landing_table(config.PRICES_STAGING_TABLE, ImportKind.PRICES),
        landing_table(config.MULTIPLIERS_STAGING_TABLE, ImportKind.MULTIPLIERS),
    ]

    try:
        async with engine.begin() as conn:
            logger.info(f"Creating tables: {', '.join(t.name for t in tables)}")
            await conn.run_sync(metadata.create_all, tables=tables)
            logger.info("Tables created successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(init_database(Settings()))
