"""
Core utilities and configuration for the buyback import backend.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Settings from the environment and the explicit ImportConfig
    database: Async SQLAlchemy engine and Supabase client construction
    exceptions: Exception hierarchy for every import failure
    logging: Logging configuration

Usage:
    from core.config import settings, ImportConfig
    from core.database import create_engine
    from core.exceptions import MissingColumnsError, StagingInsertError
    from core.logging import setup_logging

Example:
    setup_logging()
    config = ImportConfig.from_settings(settings)
"""

__all__ = [
    "settings",
    "ImportConfig",
    "create_engine",
    "create_supabase_client",
    "setup_logging",
    # Exceptions
    "ImportPipelineError",
    "InvalidImportRequestError",
    "InputError",
    "EmptyInputError",
    "ParseError",
    "MissingColumnsError",
    "StagingError",
    "StagingDeleteError",
    "StagingInsertError",
    "TransformProcedureError",
]
