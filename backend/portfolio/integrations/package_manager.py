# backend/portfolio/integrations/package_manager.py
"""
Thin wrappers around the package-manager CLIs used by the dependency dashboard.

Each manager knows how to read its manifest, list outdated packages, run a
security audit and install a package. Commands run through ``subprocess.run``
with a timeout; their JSON output is parsed even when the exit code is
non-zero because both ``npm outdated`` and ``pip-audit`` exit 1 when they have
something to report.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata as importlib_metadata
import json
import logging
from pathlib import Path
import re
import subprocess
import sys
import tomllib
from typing import Any, Callable, Dict, List, Optional, Sequence

from packaging.utils import canonicalize_name

from ..core.config import settings

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

_REQUIREMENT_RE = re.compile(
    r"^\s*(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*(?P<spec>[^;]*)"
)
_VERSION_RE = re.compile(r"\d+(?:\.\d+)*(?:[-.+]?[A-Za-z0-9]+)*")


class PackageManagerError(Exception):
    """A package-manager command failed or could not be run."""

    def __init__(self, message: str, *, command: Sequence[str] = (), stderr: str = ""):
        super().__init__(message)
        self.command = list(command)
        self.stderr = stderr


@dataclass(frozen=True)
class ManifestEntry:
    name: str
    version: str
    is_dev: bool = False


@dataclass(frozen=True)
class OutdatedEntry:
    current: Optional[str]
    latest: Optional[str]


def strip_version_prefix(spec: str) -> str:
    """``^1.2.3`` / ``>=1.2,<2`` -> ``1.2.3`` / ``1.2``; unpinned specs become ``*``."""
    match = _VERSION_RE.search(spec or "")
    return match.group(0) if match else "*"


def major_version(version: Optional[str]) -> Optional[int]:
    match = re.match(r"\s*v?(\d+)", version or "")
    return int(match.group(1)) if match else None


class PackageManager:
    """Base class; subclasses fill in the commands and output parsing."""

    name = "base"
    manifest_filename = ""

    def __init__(
        self,
        project_root: str | Path,
        *,
        timeout: float = 120.0,
        runner: Runner = subprocess.run,
    ):
        self.project_root = Path(project_root)
        self.timeout = timeout
        self._runner = runner

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.manifest_filename

    def _run(self, args: Sequence[str], *, timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        try:
            return self._runner(
                list(args),
                cwd=str(self.project_root),
                capture_output=True,
                text=True,
                timeout=timeout or self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PackageManagerError(f"{args[0]} is not installed", command=args) from exc
        except subprocess.TimeoutExpired as exc:
            raise PackageManagerError(f"{' '.join(args)} timed out", command=args) from exc

    def _run_json(self, args: Sequence[str], default: Any) -> Any:
        """Run ``args`` and parse stdout as JSON regardless of the exit code."""
        try:
            result = self._run(args)
        except PackageManagerError as exc:
            logger.warning(
                "Package manager command unavailable",
                extra={"evt": "package_manager_unavailable", "command": exc.command},
            )
            return default
        output = (result.stdout or "").strip()
        if not output:
            return default
        try:
            return json.loads(output)
        except json.JSONDecodeError:
            logger.warning(
                "Could not parse package manager output",
                extra={
                    "evt": "package_manager_bad_json",
                    "command": list(args),
                    "returncode": result.returncode,
                },
            )
            return default

    def canonical_name(self, name: str) -> str:
        """Key used to match one package across manifest, outdated and audit output."""
        return name

    def read_manifest(self) -> List[ManifestEntry]:
        raise NotImplementedError

    def outdated(self) -> Dict[str, OutdatedEntry]:
        raise NotImplementedError

    def vulnerabilities(self) -> Dict[str, List[Dict[str, Any]]]:
        """Known vulnerabilities keyed by package name."""
        raise NotImplementedError

    def install_command(self, name: str, version: Optional[str]) -> List[str]:
        raise NotImplementedError

    def installed_version(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def install(self, name: str, version: Optional[str] = None) -> Optional[str]:
        """Install or update ``name`` and return the version now installed."""
        command = self.install_command(name, version)
        result = self._run(command)
        if result.returncode != 0:
            raise PackageManagerError(
                (result.stderr or "").strip() or f"{' '.join(command)} failed",
                command=command,
                stderr=result.stderr or "",
            )
        return self.installed_version(name)


class PipPackageManager(PackageManager):
    name = "pip"
    manifest_filename = "pyproject.toml"

    def canonical_name(self, name: str) -> str:
        # pip list reports "SQLAlchemy", pip-audit reports "pyjwt"
        return canonicalize_name(name)

    def read_manifest(self) -> List[ManifestEntry]:
        with self.manifest_path.open("rb") as fh:
            project = tomllib.load(fh).get("project", {})

        entries: Dict[str, ManifestEntry] = {}
        for requirement in project.get("dependencies", []):
            entry = self._parse_requirement(requirement, is_dev=False)
            if entry:
                entries.setdefault(entry.name, entry)
        for group in project.get("optional-dependencies", {}).values():
            for requirement in group:
                entry = self._parse_requirement(requirement, is_dev=True)
                if entry:
                    entries.setdefault(entry.name, entry)
        return list(entries.values())

    @staticmethod
    def _parse_requirement(requirement: str, *, is_dev: bool) -> Optional[ManifestEntry]:
        match = _REQUIREMENT_RE.match(requirement)
        if not match:
            return None
        return ManifestEntry(
            name=match.group("name"),
            version=strip_version_prefix(match.group("spec")),
            is_dev=is_dev,
        )

    def outdated(self) -> Dict[str, OutdatedEntry]:
        rows = self._run_json(
            [sys.executable, "-m", "pip", "list", "--outdated", "--format=json"], default=[]
        )
        return {
            row["name"]: OutdatedEntry(current=row.get("version"), latest=row.get("latest_version"))
            for row in rows
            if isinstance(row, dict) and row.get("name")
        }

    def vulnerabilities(self) -> Dict[str, List[Dict[str, Any]]]:
        report = self._run_json(["pip-audit", "-f", "json"], default={})
        # pip-audit >= 2.5 wraps the list in {"dependencies": [...]}
        packages = report.get("dependencies", []) if isinstance(report, dict) else report
        findings: Dict[str, List[Dict[str, Any]]] = {}
        for package in packages or []:
            vulns = package.get("vulns") or []
            if not vulns:
                continue
            findings[package["name"]] = [
                {
                    "id": vuln.get("id"),
                    "title": vuln.get("id"),
                    "description": vuln.get("description"),
                    "severity": None,
                    "fix_versions": vuln.get("fix_versions") or [],
                }
                for vuln in vulns
            ]
        return findings

    def install_command(self, name: str, version: Optional[str]) -> List[str]:
        target = f"{name}=={version}" if version else name
        command = [sys.executable, "-m", "pip", "install", target]
        if not version:
            command.insert(4, "-U")
        return command

    def installed_version(self, name: str) -> Optional[str]:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            return None


class NpmPackageManager(PackageManager):
    name = "npm"
    manifest_filename = "package.json"

    def read_manifest(self) -> List[ManifestEntry]:
        data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        entries = [
            ManifestEntry(name=name, version=strip_version_prefix(str(spec)), is_dev=False)
            for name, spec in (data.get("dependencies") or {}).items()
        ]
        entries.extend(
            ManifestEntry(name=name, version=strip_version_prefix(str(spec)), is_dev=True)
            for name, spec in (data.get("devDependencies") or {}).items()
        )
        return entries

    def outdated(self) -> Dict[str, OutdatedEntry]:
        data = self._run_json(["npm", "outdated", "--json"], default={})
        return {
            name: OutdatedEntry(current=info.get("current"), latest=info.get("latest"))
            for name, info in (data or {}).items()
            if isinstance(info, dict)
        }

    def vulnerabilities(self) -> Dict[str, List[Dict[str, Any]]]:
        data = self._run_json(["npm", "audit", "--json"], default={})
        findings: Dict[str, List[Dict[str, Any]]] = {}
        for name, info in ((data or {}).get("vulnerabilities") or {}).items():
            advisories = [via for via in info.get("via", []) if isinstance(via, dict)]
            if not advisories:
                advisories = [{"title": f"Vulnerable dependency chain via {name}"}]
            findings[name] = [
                {
                    "id": advisory.get("url") or advisory.get("source"),
                    "title": advisory.get("title"),
                    "description": advisory.get("url"),
                    "severity": advisory.get("severity") or info.get("severity"),
                    "fix_versions": [],
                }
                for advisory in advisories
            ]
        return findings

    def install_command(self, name: str, version: Optional[str]) -> List[str]:
        if version:
            return ["npm", "install", f"{name}@{version}", "--save-exact"]
        return ["npm", "update", name]

    def installed_version(self, name: str) -> Optional[str]:
        data = self._run_json(["npm", "ls", name, "--json", "--depth=0"], default={})
        return ((data or {}).get("dependencies") or {}).get(name, {}).get("version")


def build_package_manager(kind: Optional[str] = None) -> PackageManager:
    kind = kind or settings.dependency_manager
    manager_cls = NpmPackageManager if kind == "npm" else PipPackageManager
    return manager_cls(
        settings.dependency_project_root,
        timeout=settings.dependency_command_timeout_seconds,
    )
