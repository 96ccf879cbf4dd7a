"""
Database engine and client construction.

Nothing here runs at import time: the API builds its engine (or Supabase
client) on startup and the CLI builds one per invocation.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.pool import NullPool
from supabase import AsyncClient, acreate_client
from core.config import Settings
import logging

logger = logging.getLogger(__name__)

SQLALCHEMY_BACKEND = "sqlalchemy"
SUPABASE_BACKEND = "supabase"


def create_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for direct Postgres access"""
    return create_async_engine(
        config.DATABASE_URL,
        echo=False,
        poolclass=NullPool,  # One connection per import; held for the advisory lock
        future=True
    )


async def create_supabase_client(config: Settings) -> AsyncClient:
    """Create a Supabase client authenticated with the service-role key"""
    if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set for the supabase backend"
        )
    return await acreate_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)


def describe_database(config: Settings) -> Optional[str]:
    """Host part of the configured database, safe to log"""
    if config.STAGING_BACKEND == SUPABASE_BACKEND:
        return config.SUPABASE_URL
    if "@" in config.DATABASE_URL:
        return config.DATABASE_URL.split("@", 1)[1]
    return None
