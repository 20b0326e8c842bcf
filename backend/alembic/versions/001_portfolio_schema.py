# backend/alembic/versions/001_portfolio_schema.py
"""Portfolio schema - content, media, settings, roles, dependency tooling, webhook ledger

Revision ID: 001_portfolio_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates every table of schema version 1. On Postgres it also enables row level
security: the public site reads content tables through the anon key, visitors
may insert contact messages, and everything else is reserved for the service
role the API connects with.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from portfolio.core.constants import DEFAULT_SITE_SETTINGS

# revision identifiers, used by Alembic.
revision: str = "001_portfolio_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PUBLIC_READ_TABLES = ("projects", "main_media", "bts_images", "media", "site_settings", "tag_order")
PRIVATE_TABLES = (
    "contact_messages",
    "user_roles",
    "dependencies",
    "dependency_settings",
    "security_audits",
    "webhook_events",
)

# Drop order respects foreign keys
ALL_TABLES = (
    "webhook_events",
    "security_audits",
    "dependency_settings",
    "dependencies",
    "user_roles",
    "contact_messages",
    "tag_order",
    "site_settings",
    "media",
    "bts_images",
    "main_media",
    "projects",
)


def _json_type(is_postgres: bool) -> sa.types.TypeEngine:
    return postgresql.JSONB(astext_type=sa.Text()) if is_postgres else sa.JSON()


def _tags_type(is_postgres: bool) -> sa.types.TypeEngine:
    return postgresql.ARRAY(sa.Text()) if is_postgres else sa.Text()


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def _enable_rls(table_name: str) -> None:
    op.execute(f"ALTER TABLE public.{table_name} ENABLE ROW LEVEL SECURITY")


def _create_policy(table_name: str, policy: str, statement: str) -> None:
    """Create ``policy`` on ``table_name`` unless it already exists."""
    op.execute(
        f"""
        DO $$
        BEGIN
            IF NOT EXISTS (
                SELECT 1 FROM pg_policies
                WHERE schemaname = 'public' AND tablename = '{table_name}' AND policyname = '{policy}'
            ) THEN
                EXECUTE '{statement}';
            END IF;
        END$$;
        """
    )


def upgrade() -> None:
    """Create portfolio schema."""
    print("Creating portfolio schema...")

    bind = op.get_bind()
    is_postgres = bind.dialect.name == "postgresql"
    json_type = _json_type(is_postgres)

    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("category", sa.String(255), nullable=True),
        sa.Column("type", sa.String(255), nullable=True),
        sa.Column("role", sa.String(255), nullable=True),
        sa.Column("date", sa.String(50), nullable=True),
        sa.Column("project_date", sa.Date(), nullable=True),
        sa.Column("client", sa.String(255), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("video_url", sa.Text(), nullable=True),
        sa.Column("video_platform", sa.String(50), nullable=True),
        sa.Column("video_id", sa.String(255), nullable=True),
        sa.Column("special_notes", sa.Text(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_project_date", "projects", ["project_date"])
    op.create_index("ix_projects_category", "projects", ["category"])

    op.create_table(
        "main_media",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("is_video", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("video_url", sa.Text(), nullable=True),
        sa.Column("video_platform", sa.String(50), nullable=True),
        sa.Column("video_id", sa.String(255), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_thumbnail_hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_main_media_project_id", "main_media", ["project_id"])

    op.create_table(
        "bts_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("size", sa.String(20), nullable=True),
        sa.Column("aspect_ratio", sa.String(20), nullable=True),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_bts_images_project_id", "bts_images", ["project_id"])

    op.create_table(
        "media",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("original_filename", sa.Text(), nullable=True),
        sa.Column("filepath", sa.Text(), nullable=True),
        sa.Column("public_url", sa.Text(), nullable=True),
        sa.Column("filesize", sa.BigInteger(), nullable=True),
        sa.Column("filetype", sa.String(100), nullable=True),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("tags", _tags_type(is_postgres), nullable=True),
        sa.Column("metadata", json_type, nullable=True),
        sa.Column("uploaded_by", sa.String(255), nullable=True),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_media_public_url", "media", ["public_url"])
    op.create_index("ix_media_filetype", "media", ["filetype"])

    op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(255), nullable=False, unique=True),
        sa.Column("value", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "tag_order",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tag_type", sa.String(50), nullable=False),
        sa.Column("tag_name", sa.String(255), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("tag_type", "tag_name", name="uq_tag_order_type_name"),
    )
    op.create_index("ix_tag_order_tag_type", "tag_order", ["tag_type"])

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    op.create_table(
        "dependencies",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("current_version", sa.String(100), nullable=True),
        sa.Column("latest_version", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("homepage", sa.Text(), nullable=True),
        sa.Column("license", sa.String(100), nullable=True),
        sa.Column("is_dev", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("outdated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_security_update", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("vulnerability_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("update_mode", sa.String(20), nullable=False, server_default="global"),
        sa.Column("locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("locked_version", sa.String(100), nullable=True),
        sa.Column("last_checked", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "dependency_settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", json_type, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "security_audits",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("audit_type", sa.String(50), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("affected_table", sa.String(255), nullable=True),
        sa.Column("affected_column", sa.String(255), nullable=True),
        sa.Column("remediation", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column("audited_by", sa.String(255), nullable=True),
        sa.Column("resolved_by", sa.String(255), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "severity IN ('low', 'medium', 'high', 'critical')",
            name="ck_security_audits_severity",
        ),
        sa.CheckConstraint(
            "status IN ('open', 'investigating', 'resolved', 'false_positive')",
            name="ck_security_audits_status",
        ),
    )

    op.create_table(
        "webhook_events",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("source", sa.String(50), nullable=False),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("event_id", sa.String(255), nullable=True),
        sa.Column("payload", json_type, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="received"),
        sa.Column("processing_error", sa.Text(), nullable=True),
        sa.Column("processing_duration_ms", sa.Integer(), nullable=True),
        sa.Column("related_user_id", sa.String(255), nullable=True),
        sa.Column("retry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("received_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("source", "event_id", name="uq_webhook_events_source_event_id"),
    )
    op.create_index("ix_webhook_events_source", "webhook_events", ["source"])
    op.create_index("ix_webhook_events_status", "webhook_events", ["status"])
    op.create_index("ix_webhook_events_received_at", "webhook_events", ["received_at"])

    settings_table = sa.table(
        "site_settings",
        sa.column("key", sa.String()),
        sa.column("value", sa.Text()),
    )
    op.bulk_insert(
        settings_table,
        [{"key": key, "value": value} for key, value in DEFAULT_SITE_SETTINGS.items()],
    )

    if is_postgres:
        for table_name in PUBLIC_READ_TABLES + PRIVATE_TABLES:
            _enable_rls(table_name)
        for table_name in PUBLIC_READ_TABLES:
            _create_policy(
                table_name,
                "public_read",
                f"CREATE POLICY public_read ON public.{table_name} FOR SELECT USING (true)",
            )
        _create_policy(
            "contact_messages",
            "public_insert",
            "CREATE POLICY public_insert ON public.contact_messages FOR INSERT WITH CHECK (true)",
        )

    print("Portfolio schema created")


def downgrade() -> None:
    """Drop portfolio schema."""
    print("Dropping portfolio schema...")
    for table_name in ALL_TABLES:
        op.drop_table(table_name)
