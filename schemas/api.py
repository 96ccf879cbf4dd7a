"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Literal, Union
from datetime import datetime, timezone
from models.base import ImportKind


# ============================================================================
# Import Schemas
# ============================================================================

class ImportRequest(BaseModel):
    """One upload: the import kind and the full file content"""
    type: ImportKind = Field(..., description="Import kind: prices or multipliers")
    csv: str = Field(..., description="Raw file content")


class ImportSuccess(BaseModel):
    ok: Literal[True] = True
    count: int = Field(..., ge=0, description="Records inserted into staging")

    class Config:
        json_schema_extra = {"example": {"ok": True, "count": 3}}


class ImportFailure(BaseModel):
    ok: Literal[False] = False
    error: str = Field(..., description="Human-readable message, shown verbatim")
    error_type: Optional[str] = Field(None, description="Exception class that produced the failure")
    details: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "ok": False,
                "error": "Missing required columns: base_price",
                "error_type": "MissingColumnsError",
                "details": {
                    "missing": ["base_price"],
                    "headers": ["brand", "model", "storage_gb"],
                    "normalized_headers": ["brand", "model", "storage_gb"],
                    "delimiter": ";"
                }
            }
        }


ImportResult = Union[ImportSuccess, ImportFailure]


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="healthy or unhealthy")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    backend: str
    has_url: bool
    has_service_key: bool
    database_connected: bool
    error: Optional[str] = None
