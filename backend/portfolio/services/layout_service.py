"""Persistence and compaction of the dependency dashboard widget layouts."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import WIDGET_LAYOUTS_KEY
from ..core.exceptions import ValidationException
from ..repositories.dependency_repository import DependencySettingRepository
from ..utils.grid import (
    WidgetLayout,
    calculate_grid_columns,
    clamp_layout,
    compact_layout,
)
from .base import BaseService


def _parse_layouts(raw: Any) -> List[WidgetLayout]:
    if not isinstance(raw, list):
        raise ValidationException("Layouts must be a list", code="INVALID_LAYOUTS")
    try:
        return [WidgetLayout.from_mapping(item) for item in raw]
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationException(f"Invalid layout entry: {exc}", code="INVALID_LAYOUTS") from exc


class LayoutService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = DependencySettingRepository(db)

    @BaseService.measure_operation("get_widget_layouts")
    def get_layouts(self) -> List[Dict[str, Any]]:
        return list(self.repository.get_value(WIDGET_LAYOUTS_KEY, []) or [])

    @BaseService.measure_operation("save_widget_layouts")
    def save_layouts(self, raw: Any) -> List[Dict[str, Any]]:
        if raw is None:
            raise ValidationException("Layouts are required", code="LAYOUTS_REQUIRED")
        layouts = [layout.to_dict() for layout in _parse_layouts(raw)]
        with self.transaction():
            self.repository.set_value(WIDGET_LAYOUTS_KEY, layouts)
        return layouts

    @staticmethod
    def resolve_columns(*, width: Optional[float] = None, columns: Optional[int] = None) -> int:
        if columns:
            return columns
        if width is not None:
            return calculate_grid_columns(width)
        raise ValidationException("Either width or columns is required")

    def compact(
        self, raw: Any, *, width: Optional[float] = None, columns: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        cols = self.resolve_columns(width=width, columns=columns)
        layouts = [clamp_layout(layout, cols) for layout in _parse_layouts(raw)]
        return [layout.to_dict() for layout in compact_layout(layouts, cols)]
