# backend/portfolio/repositories/project_repository.py
"""Data access for portfolio projects."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.project import Project
from .base_repository import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    def __init__(self, db: Session):
        super().__init__(db, Project)

    def get_with_media(self, project_id: str) -> Optional[Project]:
        """Load a project with its BTS images and main media in two extra queries."""
        try:
            return (
                self.db.query(Project)
                .options(selectinload(Project.bts_images), selectinload(Project.main_media))
                .filter(Project.id == project_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading project {project_id}: {str(e)}")
            raise RepositoryException(f"Failed to load project: {str(e)}")

    def list_visible(self, *, include_private: bool, now: datetime) -> List[Project]:
        """
        Projects for the public listing.

        Unless ``include_private`` is set, only public projects whose publish date
        has passed (or is unset) are returned. Ordering is left to the caller.
        """
        query = self._build_query()
        if not include_private:
            query = query.filter(
                Project.is_public.is_(True),
                or_(Project.publish_date.is_(None), Project.publish_date <= now),
            )
        return self._execute_query(query)

    def search(
        self,
        *,
        text: Optional[str] = None,
        category: Optional[str] = None,
        role: Optional[str] = None,
    ) -> List[Project]:
        """Case-insensitive substring search, newest first."""
        query = self._build_query()
        if text:
            pattern = f"%{text}%"
            query = query.filter(
                or_(
                    Project.title.ilike(pattern),
                    Project.description.ilike(pattern),
                    Project.category.ilike(pattern),
                    Project.role.ilike(pattern),
                )
            )
        if category:
            query = query.filter(Project.category == category)
        if role:
            query = query.filter(Project.role.ilike(f"%{role}%"))
        return self._execute_query(query.order_by(Project.created_at.desc()))
