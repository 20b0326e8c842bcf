import pytest

from portfolio.core.constants import DEFAULT_SITE_SETTINGS
from portfolio.core.exceptions import ValidationException
from portfolio.services.site_content_service import (
    ContactService,
    SettingsService,
    TagOrderService,
)


def test_save_settings_upserts_and_stringifies(db):
    service = SettingsService(db)

    updated = service.save_settings({"hero_heading": "Hello", "show_reel": True, "stats": {"films": 12}})
    assert updated == ["hero_heading", "show_reel", "stats"]

    service.save_settings({"hero_heading": "Hello again", "cleared": None})
    settings = service.get_settings()
    assert settings["hero_heading"] == "Hello again"
    assert settings["show_reel"] == "true"
    assert settings["stats"] == '{"films": 12}'
    assert settings["cleared"] is None


@pytest.mark.parametrize("payload", [["not", "a", "dict"], "text", 7])
def test_save_settings_rejects_non_objects(db, payload):
    with pytest.raises(ValidationException) as exc:
        SettingsService(db).save_settings(payload)
    assert exc.value.message == "Invalid settings data"


def test_save_settings_empty_object_is_noop(db):
    assert SettingsService(db).save_settings({}) == []


def test_seed_defaults_keeps_existing_values(db):
    service = SettingsService(db)
    service.save_settings({"hero_heading": "Custom"})

    seeded = service.seed_defaults()

    assert seeded == len(DEFAULT_SITE_SETTINGS) - 1
    assert service.get_settings()["hero_heading"] == "Custom"
    assert service.seed_defaults() == 0


def test_tag_order_replace_dedupes_and_orders(db):
    service = TagOrderService(db)
    service.save_order("category", ["Film", "Photo"])

    rows = service.save_order("category", [" Drone ", "Film", "Drone", ""])

    assert [(row.tag_name, row.display_order) for row in rows] == [("Drone", 0), ("Film", 1)]
    assert [row.tag_name for row in service.list_order("category")] == ["Drone", "Film"]


def test_tag_order_types_are_independent(db):
    service = TagOrderService(db)
    service.save_order("category", ["Film"])
    service.save_order("role", ["DP", "Editor"])

    assert len(service.list_order()) == 3
    assert [row.tag_name for row in service.list_order("role")] == ["DP", "Editor"]


def test_tag_order_requires_type(db):
    with pytest.raises(ValidationException):
        TagOrderService(db).save_order("", ["Film"])


def test_contact_messages_newest_first(db):
    service = ContactService(db)
    service.submit("Ana", "ana@example.com", "First")
    service.submit("Ben", "ben@example.com", "Second")

    messages = service.list_recent(limit=1)

    assert len(messages) == 1
    assert messages[0].message == "Second"
