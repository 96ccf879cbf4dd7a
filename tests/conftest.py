"""
Pytest configuration and fixtures
"""

import asyncio
import pytest
from typing import Any, Dict, List, Optional
from core.config import ImportConfig
from ingestion.base import StagingStore


class InMemoryStagingStore(StagingStore):
    """
    Staging store double that keeps tables in dicts.

    Failures can be injected per step; every call is recorded in ``calls``
    as (operation, target) so tests can assert ordering.
    """

    def __init__(
        self,
        fail_delete: bool = False,
        fail_on_batch: Optional[int] = None,
        fail_procedure: bool = False,
        pause: bool = False
    ):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.procedures_called: List[str] = []
        self.fail_delete = fail_delete
        self.fail_on_batch = fail_on_batch  # 1-based batch number
        self.fail_procedure = fail_procedure
        self.pause = pause  # yield to the event loop inside every call
        self._batches_seen = 0

    async def delete_all(self, table: str) -> None:
        self.calls.append(("delete", table))
        await self._maybe_pause()
        if self.fail_delete:
            raise RuntimeError("permission denied for table")
        self.tables[table] = []

    async def insert_rows(self, table: str, rows: List[Dict[str, Any]]) -> None:
        self.calls.append(("insert", table))
        await self._maybe_pause()
        self._batches_seen += 1
        if self.fail_on_batch is not None and self._batches_seen == self.fail_on_batch:
            raise RuntimeError("invalid input syntax for type integer")
        self.tables.setdefault(table, []).extend(dict(row) for row in rows)

    async def call_procedure(self, name: str) -> None:
        self.calls.append(("rpc", name))
        await self._maybe_pause()
        if self.fail_procedure:
            raise RuntimeError("function raised an exception")
        self.procedures_called.append(name)

    async def ping(self, table: str) -> None:
        self.calls.append(("ping", table))

    async def _maybe_pause(self) -> None:
        if self.pause:
            await asyncio.sleep(0)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])


@pytest.fixture
def store():
    """Healthy in-memory staging store"""
    return InMemoryStagingStore()


@pytest.fixture
def import_config():
    """Default pipeline configuration"""
    return ImportConfig()


@pytest.fixture
def price_csv():
    """Three valid semicolon-delimited price rows"""
    return (
        "brand;model;storage_gb;base_price\n"
        "Apple;iPhone 13;128GB;420\n"
        "Apple;iPhone 13;256 GB;480\n"
        "Samsung;Galaxy S22;128;310\n"
    )


@pytest.fixture
def multiplier_csv():
    """Multiplier rows with a column outside the allow-list"""
    return (
        "Model,Functional Ja,Functional Ja Label,Screen Title,Pay Bank Tip,Internal Note\n"
        "iPhone 13,1,Werkt perfect,Scherm,Binnen 2 dagen,skip me\n"
        "iPhone 12,0.95,,Scherm,,skip me too\n"
    )


def make_price_csv(row_count: int) -> str:
    """Price CSV with ``row_count`` numbered rows"""
    lines = ["brand;model;storage_gb;base_price"]
    lines.extend(f"Brand;Model {i};{64 + i};{100 + i}" for i in range(row_count))
    return "\n".join(lines) + "\n"


@pytest.fixture
def store_factory():
    """Build stores with injected failures"""
    return InMemoryStagingStore


@pytest.fixture
def large_price_csv():
    """Builder for numbered price files"""
    return make_price_csv
