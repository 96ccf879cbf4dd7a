"""
Pydantic schemas and canonical field sets.

Schemas:
    api: Import request, success/failure results, health response
    normalized: Allow-lists, required and integer columns per import kind

Usage:
    from schemas.api import ImportRequest, ImportSuccess, ImportFailure
    from schemas.normalized import ALLOWED_FIELDS, REQUIRED_FIELDS
"""

__all__ = [
    "ImportRequest",
    "ImportSuccess",
    "ImportFailure",
    "HealthCheckResponse",
    "ALLOWED_FIELDS",
    "REQUIRED_FIELDS",
    "INTEGER_FIELDS",
]
