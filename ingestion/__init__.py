"""
CSV import pipeline components.

Modules:
    base: Abstract staging store interface (delete, insert batch, call procedure)
    runner: Import orchestrator returning a structured result

Subpackages:
    extractors: Delimiter detection, quote-aware splitting, table parsing
    transformers: Header normalization, allow-list filtering, sanitization
    loaders: Staging loader plus SQLAlchemy and Supabase stores

Architecture:
    1. Parse - raw text into header and rows
    2. Normalize - canonical column names, required column check
    3. Sanitize - allow-listed fields, integer coercion, empty -> NULL
    4. Stage - clear table, insert batches, run the transform procedure

    Phases 1-3 never touch the database, so a bad file is rejected before
    the staging table is cleared.

Usage:
    from ingestion.runner import ImportRunner
    from ingestion.loaders.postgres_loader import SqlAlchemyStagingStore

Example:
    async with engine.connect() as connection:
        runner = ImportRunner(SqlAlchemyStagingStore(connection), ImportConfig())
        result = await runner.run({"type": "prices", "csv": text})

    if result.ok:
        print(f"Staged {result.count} rows")
"""

__all__ = [
    "StagingStore",
    "ImportRunner",
    "StagingLoader",
    "RecordNormalizer",
    "SqlAlchemyStagingStore",
    "SupabaseStagingStore",
]
