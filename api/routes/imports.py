"""
CSV import endpoint
"""

from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from api.dependencies import get_runner
from core.exceptions import (
    EmptyInputError,
    InvalidImportRequestError,
    MissingColumnsError,
    ParseError,
    StagingDeleteError,
    StagingInsertError,
    TransformProcedureError,
)
from ingestion.runner import ImportRunner
from schemas.api import ImportFailure, ImportSuccess
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Imports"])

# Failures caused by the request or the file rather than the database
_CLIENT_ERRORS = {
    cls.__name__
    for cls in (InvalidImportRequestError, EmptyInputError, ParseError, MissingColumnsError)
}

_STORE_ERRORS = {
    cls.__name__
    for cls in (StagingDeleteError, StagingInsertError, TransformProcedureError)
}


def _status_code(result) -> int:
    if result.ok:
        return 200
    if result.error_type in _CLIENT_ERRORS:
        return 422
    if result.error_type in _STORE_ERRORS:
        return 502
    return 500


@router.post(
    "/imports",
    responses={
        200: {"model": ImportSuccess},
        422: {"model": ImportFailure},
        502: {"model": ImportFailure},
    },
)
async def import_csv(
    request: Request,
    payload: Any = Body(..., examples=[{"type": "prices", "csv": "brand;model;storage_gb;base_price\n..."}]),
    runner: ImportRunner = Depends(get_runner)
):
    """
    Replace a staging table with the uploaded CSV and run its transform procedure.

    The body is validated by the pipeline itself so that malformed requests
    get the same structured failure as every other error.
    """
    request_id = getattr(request.state, "request_id", "-")
    kind = payload.get("type") if isinstance(payload, dict) else None
    logger.info(f"[{request_id}] POST /imports - type={kind}")

    result = await runner.run(payload if isinstance(payload, dict) else {})

    status_code = _status_code(result)
    logger.info(f"[{request_id}] Import finished with status {status_code}")
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))
