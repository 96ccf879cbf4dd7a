"""
Health check endpoint: configuration presence and store connectivity
"""

from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from api.dependencies import check_database
from core.config import settings
from core.database import SUPABASE_BACKEND
from schemas.api import HealthCheckResponse
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db_error: Optional[str] = Depends(check_database)):
    """
    Health check endpoint.

    Returns:
    - Whether the database URL and service credentials are configured
    - Whether the staging store answered a read
    """
    if settings.STAGING_BACKEND == SUPABASE_BACKEND:
        has_url = bool(settings.SUPABASE_URL)
        has_service_key = bool(settings.SUPABASE_SERVICE_ROLE_KEY)
    else:
        has_url = bool(settings.DATABASE_URL)
        # Credentials travel inside the connection URL
        has_service_key = "@" in settings.DATABASE_URL

    database_connected = db_error is None
    healthy = has_url and has_service_key and database_connected

    response = HealthCheckResponse(
        status="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        backend=settings.STAGING_BACKEND,
        has_url=has_url,
        has_service_key=has_service_key,
        database_connected=database_connected,
        error=db_error,
    )
    return JSONResponse(
        status_code=200 if healthy else 503,
        content=response.model_dump(mode="json")
    )
