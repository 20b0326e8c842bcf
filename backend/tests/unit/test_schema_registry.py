import pytest

from portfolio.database import Base
from portfolio.database.schema import (
    TABLES,
    SchemaRegistryError,
    TableConfig,
    creation_order,
    get_all_tables,
    get_required_tables,
    get_table_config,
    get_table_dependencies,
    get_table_dependents,
    get_tables_by_category,
    validate_table_config,
)
from portfolio import models  # noqa: F401


def test_every_registered_table_has_a_model():
    assert set(TABLES) == set(Base.metadata.tables)


def test_registry_entries_are_valid():
    for config in get_all_tables():
        assert validate_table_config(config) == []


def test_required_tables():
    names = {config.name for config in get_required_tables()}
    assert {"projects", "media", "site_settings", "user_roles"} <= names
    assert "webhook_events" not in names


def test_lookup_and_category_filters():
    assert get_table_config("projects").display_name == "Projects"
    assert get_table_config("nope") is None
    media_tables = {config.name for config in get_tables_by_category("media")}
    assert media_tables == {"main_media", "bts_images", "media"}


def test_dependencies_and_dependents():
    assert get_table_dependencies("bts_images") == ["projects"]
    assert set(get_table_dependents("projects")) == {"main_media", "bts_images", "media"}
    assert get_table_dependents("webhook_events") == []
    with pytest.raises(SchemaRegistryError):
        get_table_dependencies("nope")


def test_creation_order_puts_dependencies_first():
    ordered = creation_order(["media", "bts_images"])
    assert ordered.index("projects") < ordered.index("media")
    assert ordered.index("projects") < ordered.index("bts_images")
    assert ordered.count("projects") == 1


def test_creation_order_rejects_unknown_table():
    with pytest.raises(SchemaRegistryError):
        creation_order(["projects", "ghosts"])


def test_validate_table_config_reports_problems():
    config = TableConfig(
        name="widgets",
        display_name="",
        description="",
        category="bogus",  # type: ignore[arg-type]
        dependencies=("widgets", "missing"),
    )
    problems = validate_table_config(config)
    assert "Display name is required" in problems
    assert "Invalid category: bogus" in problems
    assert "Table widgets cannot depend on itself" in problems
    assert "Unknown dependency: missing" in problems
