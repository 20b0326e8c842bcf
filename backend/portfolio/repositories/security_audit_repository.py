"""Data access for security audit findings."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import AuditStatus
from ..models.security_audit import SecurityAudit
from .base_repository import BaseRepository


class SecurityAuditRepository(BaseRepository[SecurityAudit]):
    def __init__(self, db: Session):
        super().__init__(db, SecurityAudit)

    def find_open(self, audit_type: str, title: str) -> Optional[SecurityAudit]:
        """An unresolved finding of ``audit_type`` with the same title, if any."""
        return (
            self._build_query()
            .filter(
                SecurityAudit.audit_type == audit_type,
                SecurityAudit.title == title,
                SecurityAudit.status.in_(
                    [AuditStatus.OPEN.value, AuditStatus.INVESTIGATING.value]
                ),
            )
            .first()
        )

    def list_recent(self, *, status: Optional[str] = None, limit: int = 100) -> List[SecurityAudit]:
        query = self._build_query()
        if status:
            query = query.filter(SecurityAudit.status == status)
        return self._execute_query(query.order_by(SecurityAudit.created_at.desc()).limit(limit))
