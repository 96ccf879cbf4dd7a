"""
Staging store backed by the Supabase REST API (service-role key)
"""

from typing import Any, Dict, List
from supabase import AsyncClient
from ingestion.base import StagingStore
import logging

logger = logging.getLogger(__name__)


class SupabaseStagingStore(StagingStore):
    """
    Write staging tables through PostgREST.

    The REST API refuses an unfiltered DELETE, so clearing a table uses a
    filter on ``key_column`` that matches every row (NULL or not).
    """

    def __init__(self, client: AsyncClient, key_column: str = "model"):
        self.client = client
        self.key_column = key_column

    async def delete_all(self, table: str) -> None:
        match_all = f"{self.key_column}.is.null,{self.key_column}.not.is.null"
        await self.client.table(table).delete().or_(match_all).execute()
        logger.debug(f"Cleared {table}")

    async def insert_rows(self, table: str, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        await self.client.table(table).insert(rows).execute()

    async def call_procedure(self, name: str) -> None:
        await self.client.rpc(name, {}).execute()

    async def ping(self, table: str) -> None:
        await self.client.table(table).select(self.key_column).limit(1).execute()
