# backend/portfolio/utils/grid.py
"""
Grid layout helpers for the admin dashboard widgets.

Widgets live on a grid of ``GRID_CELL_SIZE`` pixel cells. Positions and sizes
are stored in grid units; the browser converts them to pixels. The helpers
here place new widgets in the first free slot and compact a layout upwards
after widgets are removed or moved.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
import math
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

GRID_CELL_SIZE = 20
MIN_WIDGET_WIDTH = 4
MIN_WIDGET_HEIGHT = 3

MOBILE_BREAKPOINT = 640
TABLET_BREAKPOINT = 1024


@dataclass(frozen=True)
class WidgetLayout:
    id: str
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WidgetLayout":
        return cls(
            id=str(data["id"]),
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", MIN_WIDGET_WIDTH)),
            height=int(data.get("height", MIN_WIDGET_HEIGHT)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def right(self) -> int:
        return self.x + self.width


def _round_half_up(value: float) -> int:
    # Matches browser Math.round: halves round towards +infinity
    return int(math.floor(value + 0.5))


def pixels_to_grid_units(pixels: float) -> int:
    return _round_half_up(pixels / GRID_CELL_SIZE)


def grid_units_to_pixels(units: int) -> int:
    return units * GRID_CELL_SIZE


def snap_to_grid(value: float) -> int:
    """Snap a pixel value to the nearest cell boundary."""
    return pixels_to_grid_units(value) * GRID_CELL_SIZE


def calculate_grid_columns(width: float) -> int:
    """Responsive column count for a container ``width`` pixels wide."""
    if width < MOBILE_BREAKPOINT:
        return 12
    if width < TABLET_BREAKPOINT:
        return 24
    return 36


def layouts_overlap(a: WidgetLayout, b: WidgetLayout) -> bool:
    return a.x < b.right and a.right > b.x and a.y < b.bottom and a.bottom > b.y


def clamp_layout(layout: WidgetLayout, columns: int) -> WidgetLayout:
    """Enforce minimum size and keep the widget inside ``columns``."""
    width = min(max(layout.width, MIN_WIDGET_WIDTH), max(columns, MIN_WIDGET_WIDTH))
    height = max(layout.height, MIN_WIDGET_HEIGHT)
    x = min(max(layout.x, 0), max(columns - width, 0))
    y = max(layout.y, 0)
    return replace(layout, x=x, y=y, width=width, height=height)


def find_available_position(
    layouts: Sequence[WidgetLayout],
    width: int,
    height: int,
    columns: int,
) -> Tuple[int, int]:
    """
    First free ``(x, y)`` for a ``width`` x ``height`` widget, scanning rows top-down.

    The occupancy grid is ``max_y + height + 1`` rows tall, where ``max_y`` is the
    lowest widget edge; cells below it count as free. When nothing fits (the
    widget is wider than the grid) the widget goes at ``(0, max_y)``.
    """
    max_y = max((layout.bottom for layout in layouts), default=0)
    rows = max_y + height + 1
    grid = [[False] * columns for _ in range(rows)]

    for layout in layouts:
        for y in range(max(layout.y, 0), min(layout.bottom, rows)):
            for x in range(max(layout.x, 0), min(layout.right, columns)):
                grid[y][x] = True

    def fits(x: int, y: int) -> bool:
        for dy in range(height):
            row_index = y + dy
            if row_index >= rows:
                continue
            row = grid[row_index]
            for dx in range(width):
                if row[x + dx]:
                    return False
        return True

    for y in range(rows):
        for x in range(columns - width + 1):
            if fits(x, y):
                return x, y

    return 0, max_y


def compact_layout(layouts: Iterable[WidgetLayout], columns: int) -> List[WidgetLayout]:
    """
    Float every widget as far up as it will go.

    Widgets are processed top to bottom (ties keep their input order) and each
    one only collides with widgets already placed. The input is not modified;
    ``columns`` is accepted for symmetry with placement and is not needed here.
    """
    compacted: List[WidgetLayout] = []
    for layout in sorted(layouts, key=lambda item: item.y):
        new_y = layout.y
        while new_y > 0:
            candidate = replace(layout, y=new_y - 1)
            if any(layouts_overlap(candidate, placed) for placed in compacted):
                break
            new_y -= 1
        compacted.append(replace(layout, y=new_y))
    return compacted
