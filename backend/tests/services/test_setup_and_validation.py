import logging

from sqlalchemy import inspect, text
import pytest

from portfolio.core.constants import DEFAULT_SITE_SETTINGS
from portfolio.core.exceptions import ValidationException
from portfolio.database import Base, engine
from portfolio.services.database_validator import DatabaseValidator
from portfolio.services.setup_service import SETUP_TYPES, SetupService, parse_setup_types
from portfolio.services.site_content_service import SettingsService


def _drop(*names: str) -> None:
    Base.metadata.drop_all(bind=engine, tables=[Base.metadata.tables[name] for name in names])


def test_parse_setup_types():
    assert parse_setup_types(None) == list(SETUP_TYPES)
    assert parse_setup_types("settings, bts") == ["settings", "bts"]
    assert parse_setup_types("bts,all") == list(SETUP_TYPES)
    with pytest.raises(ValidationException) as exc:
        parse_setup_types("settings,unicorns")
    assert exc.value.code == "INVALID_SETUP_TYPE"


def test_setup_reports_existing_tables(db):
    results = SetupService(db).run(["projects"])
    assert results == {
        "projects": {"success": True, "message": "Projects already exists", "tables": ["projects"]}
    }


def test_setup_creates_missing_tables_and_dependencies(db):
    _drop("bts_images", "projects")

    results = SetupService(db).run(["bts"])

    assert results["bts"]["success"] is True
    assert results["bts"]["message"] == "Behind the Scenes created"
    existing = set(inspect(engine).get_table_names())
    assert {"projects", "bts_images"} <= existing


def test_setup_seeds_default_settings(db):
    _drop("site_settings")

    results = SetupService(db).run(["settings"])

    assert results["settings"]["success"] is True
    assert f"({len(DEFAULT_SITE_SETTINGS)} default settings inserted)" in results["settings"]["message"]
    assert SettingsService(db).get_settings()["hero_heading"] == DEFAULT_SITE_SETTINGS["hero_heading"]


def test_setup_logs_created_tables(db, caplog):
    caplog.set_level(logging.INFO)
    _drop("tag_order")

    SetupService(db).run(["tags"])

    record = next(r for r in caplog.records if getattr(r, "evt", None) == "unified_setup")
    assert record.tables_created == ["tag_order"]
    assert record.failed == []


def test_validator_healthy_when_everything_exists(db):
    report = DatabaseValidator(db).validate()

    assert report.status == "healthy"
    assert report.missing_tables == []
    assert report.counts["ok"] == report.counts["total"]


def test_validator_flags_missing_required_table(db):
    _drop("media")

    report = DatabaseValidator(db).validate()

    assert report.status == "needs_setup"
    assert report.missing_tables == ["media"]
    assert report.to_dict()["counts"]["missing"] == 1


def test_validator_reports_incomplete_optional_table(db):
    _drop("webhook_events")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE webhook_events (id VARCHAR(26) PRIMARY KEY)"))

    report = DatabaseValidator(db).validate()

    assert report.status == "healthy"
    assert report.incomplete_tables == ["webhook_events"]
    table = next(t for t in report.tables if t.name == "webhook_events")
    assert "event_type" in table.missing_columns


def test_diagnostics_counts_rows(db):
    SettingsService(db).save_settings({"a": "1", "b": "2"})

    diagnostics = DatabaseValidator(db).diagnostics()

    assert diagnostics["dialect"] == "sqlite"
    assert diagnostics["tables"]["site_settings"] == 2
    assert diagnostics["tables"]["projects"] == 0
