# ============================================================================
# File: ingestion/runner.py
# Description: CSV import orchestrator with a structured-result boundary
# ============================================================================
"""
Import Runner - Orchestrates parse, normalize, validate and staging load.

This module provides the pipeline's single entry point:
- Request validation before any parsing
- Every error converted into an ImportFailure (nothing escapes)
- Imports of the same kind serialized in-process and on the store
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional
import logging

from pydantic import ValidationError

from core.config import ImportConfig
from core.exceptions import (
    ImportPipelineError,
    InvalidImportRequestError,
    InputError,
    TransformProcedureError,
)
from ingestion.base import StagingStore
from ingestion.extractors.csv_extractor import parse_table
from ingestion.loaders.staging_loader import StagingLoader
from ingestion.transformers.normalizer import RecordNormalizer
from models.base import ImportKind
from schemas.api import ImportFailure, ImportRequest, ImportResult, ImportSuccess

logger = logging.getLogger(__name__)


class ImportLocks:
    """
    One asyncio lock per import kind.

    Build one instance per process (the API keeps it on app.state) and hand
    it to every runner; different kinds may still run concurrently.
    """

    def __init__(self):
        self._locks: Dict[ImportKind, asyncio.Lock] = {}

    def for_kind(self, kind: ImportKind) -> asyncio.Lock:
        lock = self._locks.get(kind)
        if lock is None:
            lock = self._locks[kind] = asyncio.Lock()
        return lock


def describe_validation_errors(errors) -> List[str]:
    """Flatten pydantic error entries into "location: message" strings"""
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in errors
    ]


class ImportRunner:
    """
    CSV Import Orchestrator

    Responsibilities:
    - Validate the request shape
    - Parse → normalize → validate columns → stage → transform
    - Keep destructive steps behind the column check
    - Return a structured result for every outcome
    """

    def __init__(
        self,
        store: StagingStore,
        config: ImportConfig,
        locks: Optional[ImportLocks] = None
    ):
        self.store = store
        self.config = config
        # Runners only exclude each other when they share one ImportLocks
        self.locks = locks or ImportLocks()

    def parse_request(self, payload: Mapping[str, Any]) -> ImportRequest:
        """
        Validate the raw request.

        Raises:
            InvalidImportRequestError: unknown kind, missing or too-short csv
        """
        try:
            request = ImportRequest.model_validate(payload)
        except ValidationError as e:
            problems = describe_validation_errors(e.errors())
            raise InvalidImportRequestError(
                f"Invalid import request: {'; '.join(problems)}",
                details={"errors": problems},
                original_exception=e
            )

        if len(request.csv) < self.config.min_csv_length:
            raise InvalidImportRequestError(
                f"Invalid import request: csv must be at least "
                f"{self.config.min_csv_length} characters",
                details={"length": len(request.csv)}
            )
        return request

    async def import_csv(self, kind: ImportKind, csv_text: str) -> int:
        """
        Run the pipeline for one file.

        Pipeline phases:
        1. Parse - delimiter detection and quote-aware splitting
        2. Validate - required canonical columns present
        3. Transform - allow-list filtering and type coercion
        4. Stage - clear, batched insert, transform procedure

        Returns:
            Number of records inserted into the staging table

        Raises:
            ImportPipelineError: any failure, typed by phase
        """
        table = self.config.staging_table(kind)
        procedure = self.config.transform_procedure(kind)

        # --------------------------------------------------
        # PHASE 1-3: PARSE, VALIDATE, TRANSFORM (no store access)
        # --------------------------------------------------
        parsed = parse_table(csv_text)
        records = RecordNormalizer(kind).normalize(parsed)

        # --------------------------------------------------
        # PHASE 4: STAGE (destructive; serialized per kind)
        # --------------------------------------------------
        loader = StagingLoader(self.store, batch_size=self.config.batch_size)

        async with self.locks.for_kind(kind):
            async with self.store.exclusive(table):
                logger.info(f"Staging {len(records)} {kind.value} records into {table}")
                return await loader.replace_and_transform(table, procedure, records)

    async def run(self, payload: Mapping[str, Any]) -> ImportResult:
        """
        Validate and run one import request.

        Args:
            payload: {"type": "prices" | "multipliers", "csv": <file content>}

        Returns:
            ImportSuccess with the staged count, or ImportFailure with a
            message and optional diagnostic details
        """
        try:
            request = self.parse_request(payload)
            logger.info(f"Starting {request.type.value} import ({len(request.csv)} characters)")

            count = await self.import_csv(request.type, request.csv)

            logger.info(f"Import completed: {request.type.value}, {count} records staged")
            return ImportSuccess(count=count)

        except (InvalidImportRequestError, InputError) as e:
            # Rejected before anything was written
            logger.warning(
                f"Import rejected: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return self._failure(e)

        except TransformProcedureError as e:
            logger.error(
                f"Transform procedure failed after staging: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return self._failure(e)

        except ImportPipelineError as e:
            logger.error(
                f"Import failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return self._failure(e)

        except Exception as e:
            logger.exception("Unexpected error in import pipeline")
            return ImportFailure(
                error=f"Unexpected error during import: {e}",
                error_type=type(e).__name__,
            )

    @staticmethod
    def _failure(error: ImportPipelineError) -> ImportFailure:
        return ImportFailure(
            error=error.message,
            error_type=type(error).__name__,
            details=error.details or None,
        )
