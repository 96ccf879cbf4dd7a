"""
Unit tests for configuration, landing tables and the import CLI
"""

import json

import pytest
from pydantic import ValidationError
from sqlalchemy import Integer, Text
from core.config import ImportConfig, Settings
from core.database import describe_database
from models.base import ImportKind
from models.landing import landing_table, prices_landing, multipliers_landing
from scripts import run_import as run_import_module


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestImportConfig:
    """Test pipeline configuration built from settings"""

    def test_defaults(self):
        config = ImportConfig()

        assert config.batch_size == 500
        assert config.staging_table(ImportKind.PRICES) == "buyback_prices_landing"
        assert config.transform_procedure(ImportKind.MULTIPLIERS) == "import_buyback_multipliers"

    def test_from_settings(self):
        settings = make_settings(
            IMPORT_BATCH_SIZE=100,
            PRICES_STAGING_TABLE="prices_stage",
            MULTIPLIERS_TRANSFORM_PROCEDURE="apply_multipliers",
        )

        config = ImportConfig.from_settings(settings)

        assert config.batch_size == 100
        assert config.staging_table(ImportKind.PRICES) == "prices_stage"
        assert config.transform_procedure(ImportKind.MULTIPLIERS) == "apply_multipliers"

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            ImportConfig(batch_size=0)


class TestDescribeDatabase:
    def test_credentials_are_not_logged(self):
        settings = make_settings(DATABASE_URL="postgresql+asyncpg://user:secret@db:5432/app")

        assert describe_database(settings) == "db:5432/app"

    def test_supabase_url(self):
        settings = make_settings(STAGING_BACKEND="supabase", SUPABASE_URL="https://x.supabase.co")

        assert describe_database(settings) == "https://x.supabase.co"


class TestLandingTables:
    def test_price_columns(self):
        columns = prices_landing.c

        assert list(columns.keys())[:3] == ["brand", "category", "model"]
        assert isinstance(columns.storage_gb.type, Integer)
        assert isinstance(columns.base_price.type, Text)

    def test_multiplier_columns_are_text(self):
        assert all(isinstance(c.type, Text) for c in multipliers_landing.c)
        assert "model" in multipliers_landing.c

    def test_landing_table_is_reused(self):
        assert landing_table("buyback_prices_landing", ImportKind.PRICES) is prices_landing


class TestRunImportScript:
    """Test the command-line entry point"""

    def test_missing_file(self, tmp_path):
        assert run_import_module.main(["prices", str(tmp_path / "absent.csv")]) == 2

    def test_unknown_kind_is_rejected_by_parser(self, tmp_path):
        with pytest.raises(SystemExit):
            run_import_module.main(["catalog", str(tmp_path / "file.csv")])

    def test_result_is_printed(self, tmp_path, monkeypatch, capsys, price_csv):
        path = tmp_path / "prices.csv"
        path.write_text(price_csv, encoding="utf-8")
        seen = {}

        async def fake_run_import(kind, csv_path, config, batch_size=None):
            seen.update(kind=kind, path=csv_path, batch_size=batch_size)
            return {"ok": True, "count": 3}

        monkeypatch.setattr(run_import_module, "run_import", fake_run_import)

        exit_code = run_import_module.main(["prices", str(path), "--batch-size", "2"])

        assert exit_code == 0
        assert seen == {"kind": "prices", "path": path, "batch_size": 2}
        assert json.loads(capsys.readouterr().out) == {"ok": True, "count": 3}

    def test_failed_import_exit_code(self, tmp_path, monkeypatch, capsys, price_csv):
        path = tmp_path / "prices.csv"
        path.write_text(price_csv, encoding="utf-8")

        async def fake_run_import(kind, csv_path, config, batch_size=None):
            return {"ok": False, "error": "Missing required columns: base_price"}

        monkeypatch.setattr(run_import_module, "run_import", fake_run_import)

        assert run_import_module.main(["prices", str(path)]) == 1
