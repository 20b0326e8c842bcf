"""Repositories for site settings, tag ordering and contact messages."""

from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.site_content import ContactMessage, SiteSetting, TagOrder
from .base_repository import BaseRepository


class SiteSettingRepository(BaseRepository[SiteSetting]):
    def __init__(self, db: Session):
        super().__init__(db, SiteSetting)

    def get_map(self) -> Dict[str, Optional[str]]:
        rows = self._execute_query(self._build_query().order_by(SiteSetting.key))
        return {row.key: row.value for row in rows}

    def upsert(self, key: str, value: Optional[str]) -> SiteSetting:
        """Insert or update one setting. Does not commit."""
        try:
            row = self.find_one_by(key=key)
            if row is None:
                return self.create(key=key, value=value)
            row.value = value
            self.db.flush()
            return row
        except SQLAlchemyError as e:
            self.logger.error(f"Error upserting site setting {key}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to save setting {key}: {str(e)}")


class TagOrderRepository(BaseRepository[TagOrder]):
    def __init__(self, db: Session):
        super().__init__(db, TagOrder)

    def list_ordered(self, tag_type: Optional[str] = None) -> List[TagOrder]:
        query = self._build_query()
        if tag_type:
            query = query.filter(TagOrder.tag_type == tag_type)
        return self._execute_query(query.order_by(TagOrder.display_order, TagOrder.id))

    def replace(self, tag_type: str, tags: List[str]) -> List[TagOrder]:
        """Drop the stored order for ``tag_type`` and write ``tags`` in sequence."""
        self.delete_where(TagOrder.tag_type == tag_type)
        return self.bulk_create(
            [
                {"tag_type": tag_type, "tag_name": name, "display_order": index}
                for index, name in enumerate(tags)
            ]
        )


class ContactMessageRepository(BaseRepository[ContactMessage]):
    def __init__(self, db: Session):
        super().__init__(db, ContactMessage)

    def list_recent(self, limit: int = 50) -> List[ContactMessage]:
        query = self._build_query().order_by(ContactMessage.created_at.desc()).limit(limit)
        return self._execute_query(query)
