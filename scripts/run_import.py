"""
Script to import a buyback CSV file from disk into its staging table
"""

import argparse
import asyncio
import json
import sys
import logging
from pathlib import Path

from core.config import ImportConfig, Settings
from core.database import SUPABASE_BACKEND, create_engine, create_supabase_client
from core.logging import setup_logging
from ingestion.loaders.postgres_loader import SqlAlchemyStagingStore
from ingestion.loaders.supabase_loader import SupabaseStagingStore
from ingestion.runner import ImportRunner
from models.base import ImportKind

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replace a buyback staging table with a CSV file and run its transform procedure."
    )
    parser.add_argument("kind", choices=[kind.value for kind in ImportKind], help="Import kind")
    parser.add_argument("path", type=Path, help="CSV file to import")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Rows per insert batch (defaults to IMPORT_BATCH_SIZE)"
    )
    return parser


async def run_import(kind: str, path: Path, config: Settings, batch_size=None) -> dict:
    """Run one import against the configured backend and return the result as a dict"""
    import_config = ImportConfig.from_settings(config)
    if batch_size is not None:
        import_config = import_config.model_copy(update={"batch_size": batch_size})

    payload = {
        "type": kind,
        "csv": path.read_text(encoding="utf-8-sig"),
    }

    if config.STAGING_BACKEND == SUPABASE_BACKEND:
        client = await create_supabase_client(config)
        runner = ImportRunner(SupabaseStagingStore(client), import_config)
        result = await runner.run(payload)
        return result.model_dump(mode="json")

    engine = create_engine(config)
    try:
        async with engine.connect() as connection:
            runner = ImportRunner(SqlAlchemyStagingStore(connection), import_config)
            result = await runner.run(payload)
            return result.model_dump(mode="json")
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = Settings()
    setup_logging(config)

    if not args.path.is_file():
        logger.error(f"CSV file not found: {args.path}")
        return 2

    try:
        result = asyncio.run(run_import(args.kind, args.path, config, args.batch_size))
    except Exception as e:
        logger.error(f"Import could not start: {str(e)}")
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0 if result["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
