"""
FastAPI dependencies: staging store and import runner per request
"""

from typing import AsyncGenerator, Optional
from fastapi import Depends, HTTPException, Request
from core.config import ImportConfig, settings
from core.database import SUPABASE_BACKEND
from ingestion.base import StagingStore
from ingestion.loaders.postgres_loader import SqlAlchemyStagingStore
from ingestion.loaders.supabase_loader import SupabaseStagingStore
from ingestion.runner import ImportLocks, ImportRunner
import logging

logger = logging.getLogger(__name__)


async def get_store(request: Request) -> AsyncGenerator[StagingStore, None]:
    """Yield the store for the configured backend (built on startup)"""
    state = request.app.state

    if settings.STAGING_BACKEND == SUPABASE_BACKEND:
        if getattr(state, "supabase", None) is None:
            raise HTTPException(status_code=503, detail="Supabase client is not configured")
        yield SupabaseStagingStore(state.supabase)
        return

    async with state.engine.connect() as connection:
        yield SqlAlchemyStagingStore(connection)


def get_import_config() -> ImportConfig:
    return ImportConfig.from_settings(settings)


def get_import_locks(request: Request) -> ImportLocks:
    """Per-kind locks created on startup and shared by every request"""
    return request.app.state.import_locks


def get_runner(
    store: StagingStore = Depends(get_store),
    config: ImportConfig = Depends(get_import_config),
    locks: ImportLocks = Depends(get_import_locks)
) -> ImportRunner:
    return ImportRunner(store, config, locks)


async def check_database(request: Request) -> Optional[str]:
    """
    Ping the staging store.

    Returns:
        None when the store answered, otherwise the error message
    """
    state = request.app.state
    table = settings.PRICES_STAGING_TABLE

    try:
        if settings.STAGING_BACKEND == SUPABASE_BACKEND:
            if getattr(state, "supabase", None) is None:
                return "Supabase client is not configured"
            await SupabaseStagingStore(state.supabase).ping(table)
        else:
            async with state.engine.connect() as connection:
                await SqlAlchemyStagingStore(connection).ping(table)
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        return str(e)
    return None
