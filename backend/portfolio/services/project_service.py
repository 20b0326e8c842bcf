# backend/portfolio/services/project_service.py
"""
Project Service for the portfolio backend

Handles listing, search, detail lookup and admin CRUD for portfolio projects.
Video fields (platform and id) are always derived from ``video_url`` here so
that rows written through any route stay consistent.
"""

from datetime import date, datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import MissingFieldsException, NotFoundException
from ..models.project import Project
from ..repositories.bts_image_repository import BtsImageRepository
from ..repositories.project_repository import ProjectRepository
from ..schemas.project import (
    BtsImageResponse,
    MainMediaResponse,
    ProjectDeleteResponse,
    ProjectDetailResponse,
    ProjectFields,
    ProjectResponse,
)
from ..utils.video import extract_tags_from_role, extract_video_info, is_valid_uuid
from .base import BaseService
from .mock_data import find_mock_project, mock_bts_images_for

logger = logging.getLogger(__name__)

REQUIRED_PROJECT_FIELDS = ("title", "image", "category", "role")


def effective_date(project: Any) -> Optional[date]:
    """``project_date`` when set, otherwise the calendar date of ``created_at``."""
    project_date = getattr(project, "project_date", None)
    if project_date:
        return project_date
    created_at = getattr(project, "created_at", None)
    if isinstance(created_at, datetime):
        return created_at.date()
    return None


def sort_projects_by_date(projects: List[Any]) -> List[Any]:
    """Newest first; projects with no usable date go last."""
    dated = [p for p in projects if effective_date(p) is not None]
    undated = [p for p in projects if effective_date(p) is None]
    dated.sort(key=effective_date, reverse=True)
    return dated + undated


def missing_required_fields(data: Dict[str, Any]) -> List[str]:
    missing = []
    for name in REQUIRED_PROJECT_FIELDS:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def apply_video_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill ``video_platform``/``video_id`` from ``video_url`` (cleared when absent)."""
    if "video_url" not in data:
        return data
    info = extract_video_info(data.get("video_url"))
    data["video_platform"] = info.platform if info else None
    data["video_id"] = info.id if info else None
    return data


class ProjectService(BaseService):
    """Service layer for portfolio projects."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = ProjectRepository(db)
        self.bts_repository = BtsImageRepository(db)

    @staticmethod
    def to_response(project: Project) -> ProjectResponse:
        response = ProjectResponse.model_validate(project)
        response.tags = extract_tags_from_role(project.role)
        return response

    @BaseService.measure_operation("list_projects")
    def list_projects(self, *, include_private: bool = False) -> List[ProjectResponse]:
        projects = self.repository.list_visible(
            include_private=include_private, now=datetime.now(timezone.utc)
        )
        return [self.to_response(project) for project in sort_projects_by_date(projects)]

    @BaseService.measure_operation("search_projects")
    def search_projects(
        self,
        query: Optional[str] = None,
        *,
        category: Optional[str] = None,
        role: Optional[str] = None,
    ) -> List[ProjectResponse]:
        text = (query or "").strip()
        if text == "*":
            text = ""
        projects = self.repository.search(
            text=text or None, category=category or None, role=role or None
        )
        return [self.to_response(project) for project in projects]

    @BaseService.measure_operation("get_project")
    def get_project(self, project_id: str) -> ProjectDetailResponse:
        """
        Project with its BTS images and main media.

        Ids that are not UUIDs resolve against the built-in sample projects.
        """
        if not is_valid_uuid(project_id):
            return self._get_mock_project(project_id)

        project = self.repository.get_with_media(project_id)
        if project is None:
            raise NotFoundException("Project not found", code="PROJECT_NOT_FOUND")

        detail = ProjectDetailResponse.model_validate(project)
        detail.tags = extract_tags_from_role(project.role)
        if detail.video_url and (not detail.video_platform or not detail.video_id):
            info = extract_video_info(detail.video_url)
            if info:
                detail.video_platform = info.platform
                detail.video_id = info.id
        detail.bts_images = [
            BtsImageResponse.model_validate(image)
            for image in self.bts_repository.list_for_project(project_id)
        ]
        detail.main_media = [MainMediaResponse.model_validate(m) for m in project.main_media]
        return detail

    def _get_mock_project(self, project_id: str) -> ProjectDetailResponse:
        mock = find_mock_project(project_id)
        if mock is None:
            raise NotFoundException("Project not found", code="PROJECT_NOT_FOUND")

        # sample projects keep their video link in thumbnail_url
        video_source = mock.get("video_url") or mock.get("thumbnail_url")
        info = extract_video_info(video_source) if video_source else None
        if info and (not mock.get("video_platform") or not mock.get("video_id")):
            mock["video_platform"] = info.platform
            mock["video_id"] = info.id

        detail = ProjectDetailResponse.model_validate(
            {**mock, "tags": extract_tags_from_role(mock.get("role"))}
        )
        detail.bts_images = [
            BtsImageResponse.model_validate(image) for image in mock_bts_images_for(project_id)
        ]
        return detail

    def _validated_payload(self, payload: ProjectFields, *, partial: bool) -> Dict[str, Any]:
        # updates write only the fields sent, but every required field must be sent
        data = payload.model_dump(exclude_unset=partial)
        missing = missing_required_fields(data)
        if missing:
            raise MissingFieldsException(missing)
        for name in REQUIRED_PROJECT_FIELDS:
            if isinstance(data.get(name), str):
                data[name] = data[name].strip()
        return apply_video_fields(data)

    @BaseService.measure_operation("create_project")
    def create_project(self, payload: ProjectFields) -> ProjectResponse:
        data = self._validated_payload(payload, partial=False)
        data = {key: value for key, value in data.items() if value is not None}
        with self.transaction():
            project = self.repository.create(**data)
        self.logger.info(
            "Project created", extra={"evt": "project_created", "project_id": project.id}
        )
        return self.to_response(project)

    @BaseService.measure_operation("update_project")
    def update_project(self, project_id: str, payload: ProjectFields) -> ProjectResponse:
        data = self._validated_payload(payload, partial=True)
        with self.transaction():
            project = self.repository.update(project_id, **data)
            if project is None:
                raise NotFoundException("Project not found", code="PROJECT_NOT_FOUND")
        self.logger.info(
            "Project updated",
            extra={"evt": "project_updated", "project_id": project_id, "fields": sorted(data)},
        )
        return self.to_response(project)

    @BaseService.measure_operation("delete_project")
    def delete_project(self, project_id: str) -> ProjectDeleteResponse:
        with self.transaction():
            if self.repository.get_by_id(project_id) is None:
                raise NotFoundException("Project not found", code="PROJECT_NOT_FOUND")
            deleted_bts = self.bts_repository.delete_for_project(project_id)
            self.repository.delete(project_id)
        self.logger.info(
            "Project deleted",
            extra={
                "evt": "project_deleted",
                "project_id": project_id,
                "bts_images": deleted_bts,
            },
        )
        return ProjectDeleteResponse(id=project_id, deleted_bts_images=deleted_bts)
