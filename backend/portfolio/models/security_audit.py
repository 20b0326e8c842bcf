"""Security audit findings recorded from dependency audits or manual review."""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
import ulid

from ..core.enums import AuditStatus
from ..database import Base
from .types import TimestampMixin


class SecurityAudit(TimestampMixin, Base):
    __tablename__ = "security_audits"
    __table_args__ = (
        CheckConstraint(
            "severity IN ('low', 'medium', 'high', 'critical')",
            name="ck_security_audits_severity",
        ),
        CheckConstraint(
            "status IN ('open', 'investigating', 'resolved', 'false_positive')",
            name="ck_security_audits_status",
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    audit_type: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    affected_table: Mapped[Optional[str]] = mapped_column(String(255))
    affected_column: Mapped[Optional[str]] = mapped_column(String(255))
    remediation: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AuditStatus.OPEN.value)
    audited_by: Mapped[Optional[str]] = mapped_column(String(255))
    resolved_by: Mapped[Optional[str]] = mapped_column(String(255))
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<SecurityAudit {self.severity} {self.title!r} {self.status}>"
