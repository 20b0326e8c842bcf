"""Repositories for tracked dependencies and update-manager settings."""

from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.dependency import Dependency, DependencySetting
from .base_repository import BaseRepository


class DependencyRepository(BaseRepository[Dependency]):
    def __init__(self, db: Session):
        super().__init__(db, Dependency)

    def get_by_name(self, name: str) -> Optional[Dependency]:
        return self.find_one_by(name=name)

    def list_all(self) -> List[Dependency]:
        return self._execute_query(self._build_query().order_by(Dependency.is_dev, Dependency.name))

    def upsert(self, name: str, **fields: Any) -> Dependency:
        """Create the row for ``name`` or update the given fields on it."""
        existing = self.get_by_name(name)
        if existing is None:
            return self.create(name=name, **fields)
        for key, value in fields.items():
            setattr(existing, key, value)
        self.db.flush()
        return existing

    def delete_missing(self, names: List[str]) -> int:
        """Drop rows for packages no longer present in the manifest."""
        if not names:
            return 0
        return self.delete_where(Dependency.name.notin_(names))


class DependencySettingRepository(BaseRepository[DependencySetting]):
    def __init__(self, db: Session):
        super().__init__(db, DependencySetting)

    def get_value(self, key: str, default: Any = None) -> Any:
        row = self.get_by_id(key)
        if row is None or row.value is None:
            return default
        return row.value

    def set_value(self, key: str, value: Any) -> DependencySetting:
        try:
            row = self.get_by_id(key)
            if row is None:
                return self.create(key=key, value=value)
            row.value = value
            self.db.flush()
            return row
        except SQLAlchemyError as e:
            self.logger.error(f"Error saving dependency setting {key}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to save dependency setting {key}: {str(e)}")
