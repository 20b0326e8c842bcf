# backend/portfolio/repositories/media_repository.py
"""Data access for the media library."""

import json
from typing import Dict, List, Optional

from sqlalchemy import ColumnElement, func, literal, or_
from sqlalchemy.orm import Session

from ..database.session_utils import get_dialect_name
from ..models.media import Media
from .base_repository import BaseRepository


class MediaRepository(BaseRepository[Media]):
    def __init__(self, db: Session):
        super().__init__(db, Media)

    def list_filtered(
        self,
        *,
        filetype: Optional[str] = None,
        tag: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Media]:
        query = self._build_query()
        if filetype:
            query = query.filter(Media.filetype.ilike(f"{filetype}%"))
        if tag:
            query = query.filter(self._has_tag(tag))
        query = query.order_by(Media.created_at.desc()).offset(skip).limit(limit)
        return self._execute_query(query)

    def _has_tag(self, tag: str) -> ColumnElement[bool]:
        if get_dialect_name(self.db) == "postgresql":
            return literal(tag) == func.any(Media.tags)
        # JSON-encoded list elsewhere; the quoted element only matches a whole tag
        return func.instr(Media.tags, json.dumps(tag)) > 0

    def list_oldest_first(self) -> List[Media]:
        return self._execute_query(self._build_query().order_by(Media.created_at, Media.id))

    def counts_by_filetype(self) -> Dict[str, int]:
        query = self.db.query(Media.filetype, func.count(Media.id)).group_by(Media.filetype)
        return {(filetype or "unknown"): int(count) for filetype, count in self._execute_query(query)}

    def usage_by_filetype(self) -> Dict[str, Dict[str, int]]:
        """Total bytes and file count per filetype."""
        query = self.db.query(
            Media.filetype,
            func.count(Media.id),
            func.coalesce(func.sum(Media.filesize), 0),
        ).group_by(Media.filetype)
        return {
            (filetype or "unknown"): {"count": int(count), "bytes": int(total or 0)}
            for filetype, count, total in self._execute_query(query)
        }

    def find_url_match(
        self,
        urls: List[str],
        *,
        metadata_key: Optional[str] = None,
        metadata_value: Optional[str] = None,
    ) -> Optional[Media]:
        """First row whose public_url or filepath is in ``urls``, or whose metadata key matches."""
        conditions = [Media.public_url.in_(urls), Media.filepath.in_(urls)]
        if metadata_key and metadata_value:
            conditions.append(Media.media_metadata[metadata_key].as_string() == metadata_value)
        return self._build_query().filter(or_(*conditions)).order_by(Media.created_at).first()

    def find_file_match(
        self,
        *,
        file_hash: Optional[str] = None,
        filename: Optional[str] = None,
        filepath: Optional[str] = None,
    ) -> Optional[Media]:
        conditions = []
        if file_hash:
            conditions.append(Media.media_metadata["fileHash"].as_string() == file_hash)
        if filename:
            conditions.append(Media.filename == filename)
        if filepath:
            conditions.append(Media.filepath == filepath)
        if not conditions:
            return None
        return self._build_query().filter(or_(*conditions)).order_by(Media.created_at).first()

    def total_usage(self) -> Dict[str, int]:
        count, total = self.db.query(
            func.count(Media.id), func.coalesce(func.sum(Media.filesize), 0)
        ).one()
        return {"count": int(count or 0), "bytes": int(total or 0)}
