"""
Abstract staging store: the table-oriented interface the import pipeline writes through
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List


class StagingStore(ABC):
    """
    Abstract base class for the database behind the staging tables.

    Responsibilities:
    - Clearing a staging table
    - Inserting one batch of rows
    - Invoking a named transform procedure

    Implementations hold privileged credentials (row-level security is
    bypassed) and must not retry: every failure is reported to the caller.
    """

    @abstractmethod
    async def delete_all(self, table: str) -> None:
        """Delete every row of ``table``"""
        pass

    @abstractmethod
    async def insert_rows(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """
        Insert one batch of rows into ``table``.

        Args:
            table: Staging table name
            rows: Records sharing the same set of keys
        """
        pass

    @abstractmethod
    async def call_procedure(self, name: str) -> None:
        """Invoke the stored procedure ``name`` without arguments"""
        pass

    @abstractmethod
    async def ping(self, table: str) -> None:
        """Cheap read against ``table``; raises when the store is unreachable"""
        pass

    @asynccontextmanager
    async def exclusive(self, key: str) -> AsyncIterator[None]:
        """
        Hold a store-level lock for ``key`` while the block runs.

        Stores without a locking primitive rely on the in-process lock taken
        by the runner.
        """
        yield
