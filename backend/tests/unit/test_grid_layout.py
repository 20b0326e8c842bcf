import pytest

from portfolio.utils.grid import (
    GRID_CELL_SIZE,
    MIN_WIDGET_HEIGHT,
    MIN_WIDGET_WIDTH,
    WidgetLayout,
    calculate_grid_columns,
    clamp_layout,
    compact_layout,
    find_available_position,
    grid_units_to_pixels,
    layouts_overlap,
    pixels_to_grid_units,
    snap_to_grid,
)


def _w(id_: str, x: int, y: int, width: int = 4, height: int = 3) -> WidgetLayout:
    return WidgetLayout(id=id_, x=x, y=y, width=width, height=height)


@pytest.mark.parametrize(
    "pixels, units",
    [(0, 0), (9, 0), (10, 1), (29, 1), (30, 2), (-10, 0), (-11, -1)],
)
def test_pixels_to_grid_units_rounds_half_up(pixels, units):
    assert pixels_to_grid_units(pixels) == units


def test_grid_units_to_pixels_and_snap():
    assert grid_units_to_pixels(3) == 3 * GRID_CELL_SIZE
    assert snap_to_grid(47) == 40
    assert snap_to_grid(50) == 60


@pytest.mark.parametrize("width, columns", [(320, 12), (639, 12), (640, 24), (1023, 24), (1024, 36)])
def test_calculate_grid_columns_breakpoints(width, columns):
    assert calculate_grid_columns(width) == columns


def test_layouts_overlap_edges_touching_is_not_overlap():
    a = _w("a", 0, 0)
    assert layouts_overlap(a, _w("b", 2, 1))
    assert not layouts_overlap(a, _w("c", 4, 0))
    assert not layouts_overlap(a, _w("d", 0, 3))


def test_clamp_layout_enforces_minimums_and_bounds():
    clamped = clamp_layout(_w("a", 30, -2, width=1, height=1), columns=12)
    assert clamped.width == MIN_WIDGET_WIDTH
    assert clamped.height == MIN_WIDGET_HEIGHT
    assert clamped.x == 12 - MIN_WIDGET_WIDTH
    assert clamped.y == 0


def test_find_available_position_empty_grid_is_origin():
    assert find_available_position([], 4, 3, 12) == (0, 0)


def test_find_available_position_fills_first_gap_in_row():
    layouts = [_w("a", 0, 0), _w("b", 8, 0)]
    assert find_available_position(layouts, 4, 3, 12) == (4, 0)


def test_find_available_position_goes_below_when_row_is_full():
    layouts = [_w("a", 0, 0, width=12, height=2)]
    assert find_available_position(layouts, 4, 3, 12) == (0, 2)


def test_find_available_position_too_wide_falls_back_to_bottom():
    layouts = [_w("a", 0, 0, width=6, height=5)]
    assert find_available_position(layouts, 20, 3, 12) == (0, 5)


def test_compact_layout_floats_widgets_up_without_overlap():
    layouts = [_w("a", 0, 4), _w("b", 0, 10), _w("c", 4, 7)]
    compacted = {item.id: item for item in compact_layout(layouts, 12)}

    assert compacted["a"].y == 0
    assert compacted["c"].y == 0
    assert compacted["b"].y == 3
    placed = list(compacted.values())
    for i, first in enumerate(placed):
        for second in placed[i + 1 :]:
            assert not layouts_overlap(first, second)


def test_compact_layout_does_not_mutate_input():
    original = [_w("a", 0, 5)]
    compact_layout(original, 12)
    assert original[0].y == 5


def test_widget_layout_round_trips_through_mapping():
    layout = WidgetLayout.from_mapping({"id": 7, "x": "2", "y": 1, "width": 6, "height": 4})
    assert layout.id == "7"
    assert layout.to_dict() == {"id": "7", "x": 2, "y": 1, "width": 6, "height": 4}
