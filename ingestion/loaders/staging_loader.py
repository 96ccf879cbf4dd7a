"""
Replace a staging table's contents and hand off to the transform procedure
"""

from typing import List
from ingestion.base import StagingStore
from schemas.normalized import SanitizedRecord
from core.exceptions import (
    StagingDeleteError,
    StagingInsertError,
    TransformProcedureError,
)
import logging

logger = logging.getLogger(__name__)


class StagingLoader:
    """
    Load sanitized records into a staging table.

    Steps run strictly in order and each one is awaited before the next:
    1. Delete every row of the staging table
    2. Insert the records in fixed-size batches, in row order
    3. Invoke the transform procedure

    There is no retry and no rollback: a failure leaves the staging table
    as the completed steps left it.
    """

    def __init__(self, store: StagingStore, batch_size: int = 500):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store = store
        self.batch_size = batch_size

    async def clear(self, table: str) -> None:
        try:
            await self.store.delete_all(table)
        except Exception as e:
            raise StagingDeleteError(
                f"Clearing staging table {table} failed: {e}",
                details={"table": table},
                original_exception=e
            )
        logger.info(f"Cleared staging table {table}")

    async def load_batches(self, table: str, records: List[SanitizedRecord]) -> int:
        """
        Insert records batch by batch.

        Returns:
            Number of records inserted

        Raises:
            StagingInsertError: on the first failing batch; later batches are
                not attempted
        """
        total_loaded = 0

        for offset in range(0, len(records), self.batch_size):
            batch = records[offset:offset + self.batch_size]
            batch_number = offset // self.batch_size + 1
            try:
                await self.store.insert_rows(table, batch)
            except Exception as e:
                raise StagingInsertError(
                    f"Insert into {table} failed at batch {batch_number} "
                    f"(rows {offset + 1}-{offset + len(batch)}): {e}",
                    details={
                        "table": table,
                        "batch": batch_number,
                        "offset": offset,
                        "example": batch[0],
                    },
                    original_exception=e
                )
            total_loaded += len(batch)
            logger.info(f"Batch {batch_number}: inserted {len(batch)} rows into {table}")

        return total_loaded

    async def transform(self, procedure: str, staged_count: int) -> None:
        try:
            await self.store.call_procedure(procedure)
        except Exception as e:
            raise TransformProcedureError(
                f"Procedure {procedure} failed after {staged_count} rows were staged: {e}. "
                f"The staging table is complete; re-run {procedure} instead of uploading the file again.",
                details={"procedure": procedure, "staged_count": staged_count},
                original_exception=e
            )
        logger.info(f"Procedure {procedure} completed")

    async def replace_and_transform(
        self,
        table: str,
        procedure: str,
        records: List[SanitizedRecord]
    ) -> int:
        """
        Run clear → batched insert → procedure.

        Returns:
            Number of records inserted into the staging table
        """
        await self.clear(table)
        count = await self.load_batches(table, records)
        await self.transform(procedure, count)
        return count
