# backend/portfolio/database/schema.py
"""
Registry of every table the application owns.

Setup and validation endpoints use this instead of hard-coding table lists:
it records which tables are required for the public site to render, how
tables are grouped in the admin UI, and which tables must exist before
another can be created (foreign keys).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Iterable, List, Literal, Optional

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 1

TableCategory = Literal["core", "content", "media", "security", "dependencies", "other"]
TABLE_CATEGORIES: tuple[str, ...] = ("core", "content", "media", "security", "dependencies", "other")


class SchemaRegistryError(ValueError):
    """Raised when the registry is asked for something it cannot satisfy."""


@dataclass(frozen=True)
class TableConfig:
    name: str
    display_name: str
    description: str
    category: TableCategory
    required: bool = False
    version: int = CURRENT_SCHEMA_VERSION
    dependencies: tuple[str, ...] = field(default_factory=tuple)


TABLES: Dict[str, TableConfig] = {
    config.name: config
    for config in (
        TableConfig(
            name="site_settings",
            display_name="Site Settings",
            description="Key/value text content for the public site",
            category="core",
            required=True,
        ),
        TableConfig(
            name="user_roles",
            display_name="User Roles",
            description="Roles mirrored from Clerk user metadata",
            category="security",
            required=True,
        ),
        TableConfig(
            name="projects",
            display_name="Projects",
            description="Portfolio projects",
            category="content",
            required=True,
        ),
        TableConfig(
            name="main_media",
            display_name="Main Media",
            description="Images and videos shown at the top of a project page",
            category="media",
            dependencies=("projects",),
        ),
        TableConfig(
            name="bts_images",
            display_name="Behind the Scenes",
            description="Behind-the-scenes gallery images per project",
            category="media",
            dependencies=("projects",),
        ),
        TableConfig(
            name="media",
            display_name="Media Library",
            description="Uploaded files and their metadata",
            category="media",
            required=True,
            dependencies=("projects",),
        ),
        TableConfig(
            name="tag_order",
            display_name="Tag Order",
            description="Display order of filter tags",
            category="content",
        ),
        TableConfig(
            name="contact_messages",
            display_name="Contact Messages",
            description="Submissions from the contact form",
            category="content",
        ),
        TableConfig(
            name="dependencies",
            display_name="Dependencies",
            description="Packages tracked by the update manager",
            category="dependencies",
        ),
        TableConfig(
            name="dependency_settings",
            display_name="Dependency Settings",
            description="Update manager settings and dashboard layouts",
            category="dependencies",
        ),
        TableConfig(
            name="security_audits",
            display_name="Security Audits",
            description="Open and resolved security findings",
            category="security",
        ),
        TableConfig(
            name="webhook_events",
            display_name="Webhook Events",
            description="Ledger of received Clerk webhooks",
            category="other",
        ),
    )
}


def get_all_tables() -> List[TableConfig]:
    return list(TABLES.values())


def get_table_config(name: str) -> Optional[TableConfig]:
    return TABLES.get(name)


def get_tables_by_category(category: str) -> List[TableConfig]:
    return [config for config in TABLES.values() if config.category == category]


def get_required_tables() -> List[TableConfig]:
    return [config for config in TABLES.values() if config.required]


def get_table_dependents(name: str) -> List[str]:
    """
    Tables that depend on ``name``, directly or transitively, nearest first.

    Cycles are tolerated: a table already visited is not expanded again.
    """
    seen: List[str] = []
    queue = [name]
    while queue:
        current = queue.pop(0)
        for config in TABLES.values():
            if current in config.dependencies and config.name not in seen and config.name != name:
                seen.append(config.name)
                queue.append(config.name)
    return seen


def get_table_dependencies(name: str) -> List[str]:
    """
    All tables ``name`` depends on, transitively, nearest first.

    Cycles are tolerated: a table already visited is not expanded again.
    """
    config = TABLES.get(name)
    if config is None:
        raise SchemaRegistryError(f"Unknown table: {name}")

    seen: List[str] = []
    stack = list(config.dependencies)
    while stack:
        current = stack.pop(0)
        if current in seen or current == name:
            continue
        seen.append(current)
        dep_config = TABLES.get(current)
        if dep_config is not None:
            stack.extend(dep_config.dependencies)
    return seen


def validate_table_config(config: TableConfig) -> List[str]:
    """Return a list of problems with ``config``; empty when it is valid."""
    errors: List[str] = []
    if not config.name:
        errors.append("Table name is required")
    if not config.display_name:
        errors.append("Display name is required")
    if config.category not in TABLE_CATEGORIES:
        errors.append(f"Invalid category: {config.category}")
    for dependency in config.dependencies:
        if dependency == config.name:
            errors.append(f"Table {config.name} cannot depend on itself")
        elif dependency not in TABLES:
            errors.append(f"Unknown dependency: {dependency}")
    return errors


def creation_order(names: Iterable[str]) -> List[str]:
    """
    Order ``names`` (plus everything they depend on) so dependencies come first.

    Raises SchemaRegistryError on unknown tables or dependency cycles.
    """
    ordered: List[str] = []
    visiting: set[str] = set()

    def visit(table: str) -> None:
        if table in ordered:
            return
        if table in visiting:
            raise SchemaRegistryError(f"Dependency cycle detected at {table}")
        config = TABLES.get(table)
        if config is None:
            raise SchemaRegistryError(f"Unknown table: {table}")
        visiting.add(table)
        for dependency in config.dependencies:
            visit(dependency)
        visiting.discard(table)
        ordered.append(table)

    for name in names:
        visit(name)
    return ordered


def _validate_registry() -> None:
    for config in TABLES.values():
        problems = validate_table_config(config)
        if problems:
            logger.error("Invalid table config for %s: %s", config.name, "; ".join(problems))


_validate_registry()
