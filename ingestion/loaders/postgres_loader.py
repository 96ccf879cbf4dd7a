"""
Staging store backed by a direct Postgres connection (SQLAlchemy async)
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List
from sqlalchemy import column, delete, func, insert, literal_column, select, table
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.expression import Executable
from ingestion.base import StagingStore
import logging

logger = logging.getLogger(__name__)


class SqlAlchemyStagingStore(StagingStore):
    """
    Write staging tables through one held Postgres connection.

    Ensures:
    - Each step (delete, every batch, the procedure) commits on its own
    - A failed step is rolled back before the error propagates
    - The advisory lock lives on the same connection for the whole import
    """

    def __init__(self, connection: AsyncConnection):
        self.conn = connection

    async def _run(self, statement: Executable, parameters: Any = None):
        try:
            if parameters is None:
                result = await self.conn.execute(statement)
            else:
                result = await self.conn.execute(statement, parameters)
            await self.conn.commit()
            return result
        except Exception:
            await self.conn.rollback()
            raise

    async def delete_all(self, table_name: str) -> None:
        await self._run(delete(table(table_name)))
        logger.debug(f"Cleared {table_name}")

    async def insert_rows(self, table_name: str, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        target = table(table_name, *[column(name) for name in rows[0].keys()])
        # executemany: one INSERT compiled from the first row's keys
        await self._run(insert(target), rows)

    async def call_procedure(self, name: str) -> None:
        # "schema.function" resolves through func's package attribute access
        procedure = func
        for part in name.split("."):
            procedure = getattr(procedure, part)
        await self._run(select(procedure()))

    async def ping(self, table_name: str) -> None:
        await self._run(select(literal_column("1")).select_from(table(table_name)).limit(1))

    @asynccontextmanager
    async def exclusive(self, key: str) -> AsyncIterator[None]:
        """Session-level pg advisory lock keyed by ``hashtext(key)``"""
        await self._run(select(func.pg_advisory_lock(func.hashtext(key))))
        try:
            yield
        finally:
            await self._run(select(func.pg_advisory_unlock(func.hashtext(key))))
