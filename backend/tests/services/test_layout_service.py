import pytest

from portfolio.core.exceptions import ValidationException
from portfolio.services.layout_service import LayoutService


def test_layouts_default_to_empty(db):
    assert LayoutService(db).get_layouts() == []


def test_save_and_reload_layouts(db):
    service = LayoutService(db)

    saved = service.save_layouts([{"id": "summary", "x": 0, "y": 0, "width": 8, "height": 4}, {"id": "audits"}])

    assert saved[1] == {"id": "audits", "x": 0, "y": 0, "width": 4, "height": 3}
    assert LayoutService(db).get_layouts() == saved


@pytest.mark.parametrize("raw, code", [(None, "LAYOUTS_REQUIRED"), ({"id": "x"}, "INVALID_LAYOUTS"), ([{"x": 1}], "INVALID_LAYOUTS")])
def test_save_layouts_rejects_bad_input(db, raw, code):
    with pytest.raises(ValidationException) as exc:
        LayoutService(db).save_layouts(raw)
    assert exc.value.code == code


def test_resolve_columns():
    assert LayoutService.resolve_columns(columns=10) == 10
    assert LayoutService.resolve_columns(width=800) == 24
    with pytest.raises(ValidationException):
        LayoutService.resolve_columns()


def test_compact_clamps_then_floats_up(db):
    result = LayoutService(db).compact(
        [
            {"id": "a", "x": 0, "y": 5, "width": 4, "height": 3},
            {"id": "b", "x": 20, "y": 9, "width": 2, "height": 1},
        ],
        width=320,
    )

    assert result == [
        {"id": "a", "x": 0, "y": 0, "width": 4, "height": 3},
        {"id": "b", "x": 8, "y": 0, "width": 4, "height": 3},
    ]
