# backend/portfolio/services/dependency_service.py
"""
Dependency Update Service

Backs the admin dependency dashboard: scanning the project manifest, updating
packages one at a time or in bulk according to their update mode, and keeping
a record of audit findings.

The package-manager and registry calls are slow and blocking (subprocesses and
HTTP), so ``run_scan`` is async and pushes the blocking pieces to threads.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import time
from typing import Any, Dict, Iterable, List, Optional, Protocol

from packaging.version import InvalidVersion, Version
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import (
    GLOBAL_UPDATE_MODE_KEY,
    SECURITY_SCORE_OUTDATED_WEIGHT,
    SECURITY_SCORE_VULNERABLE_WEIGHT,
)
from ..core.enums import AuditSeverity, AuditStatus, UpdateMode
from ..core.exceptions import (
    DependencyLockedException,
    ExternalServiceException,
    NotFoundException,
    ValidationException,
)
from ..core.metrics import DEPENDENCY_SCAN_SECONDS, DEPENDENCY_UPDATES_TOTAL
from ..integrations.package_manager import (
    ManifestEntry,
    OutdatedEntry,
    PackageManager,
    PackageManagerError,
    build_package_manager,
    major_version,
)
from ..integrations.package_registry import NO_DESCRIPTION, PackageRegistryClient
from ..models.dependency import Dependency
from ..models.security_audit import SecurityAudit
from ..repositories.dependency_repository import (
    DependencyRepository,
    DependencySettingRepository,
)
from ..repositories.security_audit_repository import SecurityAuditRepository
from .base import BaseService

DEPENDENCY_AUDIT_TYPE = "dependency"
DEFAULT_GLOBAL_MODE = UpdateMode.CONSERVATIVE.value


class _UpdateCandidate(Protocol):
    name: str
    current_version: Optional[str]
    latest_version: Optional[str]
    outdated: bool
    has_security_update: bool
    update_mode: str
    locked: bool


def calculate_security_score(deps: Iterable[Any]) -> int:
    """
    100 minus the vulnerable share (weighted 50) and the outdated share (weighted 20).

    Accepts ORM rows or dicts; an empty list scores 100.
    """
    items = list(deps)
    total = len(items)
    if total == 0:
        return 100

    def flag(item: Any, key: str) -> bool:
        value = item.get(key) if isinstance(item, dict) else getattr(item, key, False)
        return bool(value)

    vulnerable = sum(1 for item in items if flag(item, "has_security_update"))
    outdated = sum(1 for item in items if flag(item, "outdated"))
    score = 100.0
    score -= (vulnerable / total) * SECURITY_SCORE_VULNERABLE_WEIGHT
    score -= (outdated / total) * SECURITY_SCORE_OUTDATED_WEIGHT
    return max(0, min(100, int(score + 0.5)))


def effective_mode(dep: _UpdateCandidate, global_mode: str) -> str:
    mode = dep.update_mode or UpdateMode.GLOBAL.value
    return global_mode if mode == UpdateMode.GLOBAL.value else mode


def should_update(dep: _UpdateCandidate, mode: str) -> bool:
    """Whether a dependency qualifies for a bulk update under ``mode``."""
    if dep.locked:
        return False
    if not (dep.outdated or dep.has_security_update):
        return False
    if mode == UpdateMode.AUTO.value:
        return True
    if mode == UpdateMode.AUTO_MINOR.value:
        current, latest = major_version(dep.current_version), major_version(dep.latest_version)
        return current is not None and current == latest
    if mode == UpdateMode.CONSERVATIVE.value:
        return bool(dep.has_security_update)
    return False


def select_for_update(deps: Iterable[_UpdateCandidate], global_mode: str) -> List[_UpdateCandidate]:
    """Dependencies a bulk run should touch; ``global`` rows inherit ``global_mode``."""
    return [dep for dep in deps if should_update(dep, effective_mode(dep, global_mode))]


def _validate_mode(mode: str, *, allow_global: bool) -> str:
    allowed = {m.value for m in UpdateMode} if allow_global else UpdateMode.global_choices()
    if mode not in allowed:
        raise ValidationException(
            f"Invalid update mode: {mode}. Must be one of: {', '.join(sorted(allowed))}",
            code="INVALID_UPDATE_MODE",
        )
    return mode


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DependencyService(BaseService):
    def __init__(
        self,
        db: Session,
        manager: Optional[PackageManager] = None,
        registry: Optional[PackageRegistryClient] = None,
    ):
        super().__init__(db)
        self.repository = DependencyRepository(db)
        self.settings_repository = DependencySettingRepository(db)
        self.audit_repository = SecurityAuditRepository(db)
        self.manager = manager or build_package_manager()
        self.registry = registry or PackageRegistryClient(
            self.manager.name, timeout=settings.outbound_timeout_seconds
        )

    # Settings

    def get_global_mode(self) -> str:
        value = self.settings_repository.get_value(GLOBAL_UPDATE_MODE_KEY, DEFAULT_GLOBAL_MODE)
        return value if value in UpdateMode.global_choices() else DEFAULT_GLOBAL_MODE

    @BaseService.measure_operation("set_global_update_mode")
    def set_global_mode(self, mode: str) -> str:
        _validate_mode(mode, allow_global=False)
        with self.transaction():
            self.settings_repository.set_value(GLOBAL_UPDATE_MODE_KEY, mode)
        self.logger.info("Global update mode changed", extra={"evt": "update_mode_set", "mode": mode})
        return mode

    # Reads

    @BaseService.measure_operation("list_dependencies")
    def list_dependencies(self) -> Dict[str, Any]:
        deps = self.repository.list_all()
        checked = [dep.last_checked for dep in deps if dep.last_checked]
        return {
            "dependencies": deps,
            "summary": {
                "total": len(deps),
                "outdated": sum(1 for dep in deps if dep.outdated),
                "vulnerable": sum(1 for dep in deps if dep.has_security_update),
                "locked": sum(1 for dep in deps if dep.locked),
                "security_score": calculate_security_score(deps),
                "global_mode": self.get_global_mode(),
                "last_scan": max(checked) if checked else None,
            },
        }

    def get_dependency(self, name: str) -> Dependency:
        dep = self.repository.get_by_name(name)
        if dep is None:
            raise NotFoundException(f"Dependency {name} not found", code="DEPENDENCY_NOT_FOUND")
        return dep

    @BaseService.measure_operation("list_security_audits")
    def list_audits(self, *, status: Optional[str] = None, limit: int = 100) -> List[SecurityAudit]:
        return self.audit_repository.list_recent(status=status, limit=limit)

    # Scan

    async def run_scan(self) -> Dict[str, Any]:
        """
        Read the manifest, look up descriptions, then merge outdated and audit
        results into the ``dependencies`` table.
        """
        start = time.monotonic()
        try:
            entries: List[ManifestEntry] = await asyncio.to_thread(self.manager.read_manifest)
        except (OSError, ValueError) as exc:
            raise ExternalServiceException(
                f"Could not read {self.manager.manifest_filename}: {exc}",
                code="MANIFEST_UNREADABLE",
            ) from exc

        descriptions = await self.registry.fetch_descriptions([entry.name for entry in entries])
        outdated, vulnerabilities = await asyncio.gather(
            asyncio.to_thread(self.manager.outdated),
            asyncio.to_thread(self.manager.vulnerabilities),
        )

        rows = await asyncio.to_thread(
            self._persist_scan, entries, descriptions, outdated, vulnerabilities
        )
        duration = time.monotonic() - start
        DEPENDENCY_SCAN_SECONDS.observe(duration)

        result = {
            "dependencies": rows,
            "vulnerabilities": len(vulnerabilities),
            "outdated_packages": len(outdated),
            "security_score": calculate_security_score(rows),
            "last_scan": _now(),
        }
        self.logger.info(
            "Dependency scan finished",
            extra={
                "evt": "dependency_scan",
                "packages": len(rows),
                "outdated": result["outdated_packages"],
                "vulnerabilities": result["vulnerabilities"],
                "duration_s": round(duration, 2),
            },
        )
        return result

    def _persist_scan(
        self,
        entries: List[ManifestEntry],
        descriptions: Dict[str, str],
        outdated: Dict[str, OutdatedEntry],
        vulnerabilities: Dict[str, List[Dict[str, Any]]],
    ) -> List[Dependency]:
        canonical = self.manager.canonical_name
        manifest_names = {canonical(entry.name): entry.name for entry in entries}
        outdated_by_key = {canonical(name): info for name, info in outdated.items()}
        # audit titles use the manifest spelling of the package
        findings = {
            manifest_names.get(canonical(name), name): advisories
            for name, advisories in vulnerabilities.items()
        }

        checked_at = _now()
        rows: List[Dependency] = []
        with self.transaction():
            for entry in entries:
                info = outdated_by_key.get(canonical(entry.name))
                advisories = findings.get(entry.name, [])
                current = (info.current if info and info.current else None) or entry.version
                rows.append(
                    self.repository.upsert(
                        entry.name,
                        current_version=current,
                        latest_version=(info.latest if info and info.latest else current),
                        outdated=info is not None,
                        has_security_update=bool(advisories),
                        vulnerability_count=len(advisories),
                        is_dev=entry.is_dev,
                        description=descriptions.get(entry.name, NO_DESCRIPTION),
                        last_checked=checked_at,
                    )
                )
            self.repository.delete_missing([entry.name for entry in entries])
            self._record_findings(findings)
        return rows

    # Audit findings

    @BaseService.measure_operation("record_audit_findings")
    def record_audit_findings(
        self, vulnerabilities: Dict[str, List[Dict[str, Any]]], *, audited_by: str = "dependency-scan"
    ) -> List[SecurityAudit]:
        with self.transaction():
            return self._record_findings(vulnerabilities, audited_by=audited_by)

    def _record_findings(
        self, vulnerabilities: Dict[str, List[Dict[str, Any]]], *, audited_by: str = "dependency-scan"
    ) -> List[SecurityAudit]:
        created: List[SecurityAudit] = []
        for name, advisories in vulnerabilities.items():
            title = f"Vulnerable dependency: {name}"
            if self.audit_repository.find_open(DEPENDENCY_AUDIT_TYPE, title):
                continue
            created.append(
                self.audit_repository.create(
                    audit_type=DEPENDENCY_AUDIT_TYPE,
                    severity=_worst_severity(advisories),
                    title=title,
                    description="; ".join(
                        str(advisory.get("title") or advisory.get("id"))
                        for advisory in advisories
                        if advisory.get("title") or advisory.get("id")
                    )
                    or None,
                    remediation=_remediation(name, advisories),
                    status=AuditStatus.OPEN.value,
                    audited_by=audited_by,
                )
            )
        return created

    # Updates

    @BaseService.measure_operation("update_dependency")
    def update_dependency(
        self, name: str, version: Optional[str] = None, *, mode: str = "manual"
    ) -> Dict[str, Any]:
        """Install ``name`` (optionally pinned to ``version``) and record the result."""
        if not name:
            raise ValidationException("Package name is required")

        existing = self.repository.get_by_name(name)
        if existing is not None and existing.locked:
            if not version or version != existing.locked_version:
                DEPENDENCY_UPDATES_TOTAL.labels(mode=mode, outcome="locked").inc()
                raise DependencyLockedException(name, existing.locked_version)

        try:
            new_version = self.manager.install(name, version)
        except PackageManagerError as exc:
            DEPENDENCY_UPDATES_TOTAL.labels(mode=mode, outcome="failed").inc()
            self.logger.warning(
                "Dependency update failed",
                extra={"evt": "dependency_update_failed", "package": name, "error": str(exc)},
            )
            raise ExternalServiceException(str(exc), code="DEPENDENCY_UPDATE_FAILED") from exc

        with self.transaction():
            self.repository.upsert(
                name,
                current_version=new_version or version,
                latest_version=new_version or version,
                outdated=False,
                has_security_update=False,
                vulnerability_count=0,
                last_updated=_now(),
            )

        DEPENDENCY_UPDATES_TOTAL.labels(mode=mode, outcome="updated").inc()
        self.logger.info(
            "Dependency updated",
            extra={"evt": "dependency_updated", "package": name, "version": new_version},
        )
        return {"success": True, "name": name, "new_version": new_version}

    @BaseService.measure_operation("apply_updates")
    def apply_updates(self, mode: Optional[str] = None) -> Dict[str, Any]:
        """
        Update every dependency that qualifies under its effective mode.

        ``mode`` overrides the stored global mode for rows set to ``global``.
        Failures are collected per package; the run keeps going.
        """
        global_mode = _validate_mode(mode, allow_global=False) if mode else self.get_global_mode()
        candidates = select_for_update(self.repository.list_all(), global_mode)

        results: List[Dict[str, Any]] = []
        updated = failed = 0
        for dep in candidates:
            run_mode = effective_mode(dep, global_mode)
            try:
                outcome = self.update_dependency(dep.name, mode=run_mode)
                results.append(outcome)
                updated += 1
            except (ExternalServiceException, DependencyLockedException) as exc:
                results.append({"success": False, "name": dep.name, "error": exc.message})
                failed += 1

        return {"success": failed == 0, "updated": updated, "failed": failed, "results": results}

    @BaseService.measure_operation("configure_dependency")
    def configure(
        self,
        name: str,
        *,
        update_mode: Optional[str] = None,
        locked: Optional[bool] = None,
        locked_version: Optional[str] = None,
    ) -> Dependency:
        """Change one dependency's update mode and/or lock state."""
        if update_mode is not None:
            _validate_mode(update_mode, allow_global=True)

        with self.transaction():
            dep = self.get_dependency(name)
            if update_mode is not None:
                dep.update_mode = update_mode
            if locked is not None:
                dep.locked = locked
                # locking pins the current version unless one is given
                dep.locked_version = (locked_version or dep.current_version) if locked else None
            self.repository.flush()
        return dep


_SEVERITY_RANK = {level.value: rank for rank, level in enumerate(AuditSeverity)}


def _normalize_severity(value: Any) -> Optional[str]:
    level = str(value or "").lower()
    if level == "moderate":
        level = AuditSeverity.MEDIUM.value
    return level if level in _SEVERITY_RANK else None


def _worst_severity(advisories: List[Dict[str, Any]]) -> str:
    levels = [
        level
        for level in (_normalize_severity(advisory.get("severity")) for advisory in advisories)
        if level
    ]
    if not levels:
        # pip-audit does not report severity
        return AuditSeverity.HIGH.value
    return max(levels, key=lambda level: _SEVERITY_RANK[level])


def _version_key(version: str) -> Version:
    try:
        return Version(version)
    except InvalidVersion:
        return Version("0")


def _remediation(name: str, advisories: List[Dict[str, Any]]) -> str:
    fixes = {str(fix) for advisory in advisories for fix in advisory.get("fix_versions") or []}
    if fixes:
        return f"Upgrade {name} to {max(fixes, key=_version_key)} or later"
    return f"Upgrade {name} to the latest release"
