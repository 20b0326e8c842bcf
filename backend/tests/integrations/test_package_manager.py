import json
import subprocess

import pytest

from portfolio.integrations.package_manager import (
    NpmPackageManager,
    PackageManagerError,
    PipPackageManager,
    build_package_manager,
    major_version,
    strip_version_prefix,
)
from tests.helpers import FakeRunner, completed


@pytest.mark.parametrize(
    "spec, expected",
    [("^1.2.3", "1.2.3"), ("~4.17.21", "4.17.21"), (">=1.2,<2", "1.2"), ("==0.27.0", "0.27.0"), ("", "*"), ("latest", "*")],
)
def test_strip_version_prefix(spec, expected):
    assert strip_version_prefix(spec) == expected


def test_major_version():
    assert major_version("v3.1.0") == 3
    assert major_version("10") == 10
    assert major_version(None) is None
    assert major_version("*") is None


def test_pip_manifest_reads_runtime_and_optional_groups(package_manager):
    entries = {entry.name: entry for entry in package_manager.read_manifest()}

    assert entries["fastapi"].version == "0.110"
    assert not entries["fastapi"].is_dev
    assert entries["httpx"].version == "0.27.0"
    assert entries["pytest"].is_dev


def test_pip_manifest_handles_extras_and_markers(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        "[project]\n"
        'dependencies = ["uvicorn[standard]>=0.27", "tomli; python_version < \'3.11\'", "PyJWT[crypto]"]\n',
        encoding="utf-8",
    )
    entries = {e.name: e.version for e in PipPackageManager(tmp_path, runner=FakeRunner()).read_manifest()}
    assert entries == {"uvicorn": "0.27", "tomli": "*", "PyJWT": "*"}


def test_pip_outdated_and_audit_parse_json_on_nonzero_exit(package_manager, runner):
    runner.responses["pip list --outdated"] = completed(
        json.dumps([{"name": "fastapi", "version": "0.110.0", "latest_version": "0.115.0"}])
    )
    runner.responses["pip-audit"] = completed(
        json.dumps(
            {
                "dependencies": [
                    {"name": "httpx", "vulns": [{"id": "GHSA-1", "fix_versions": ["0.27.2"]}]},
                    {"name": "fastapi", "vulns": []},
                ]
            }
        ),
        returncode=1,
    )

    outdated = package_manager.outdated()
    assert outdated["fastapi"].current == "0.110.0"
    assert outdated["fastapi"].latest == "0.115.0"

    findings = package_manager.vulnerabilities()
    assert list(findings) == ["httpx"]
    assert findings["httpx"][0]["fix_versions"] == ["0.27.2"]
    assert findings["httpx"][0]["severity"] is None


def test_pip_bad_output_falls_back_to_empty(package_manager, runner):
    runner.responses["pip list --outdated"] = completed("WARNING: not json")
    assert package_manager.outdated() == {}


def test_missing_tool_is_treated_as_no_findings(tmp_path):
    def missing(args, **kwargs):
        raise FileNotFoundError(args[0])

    manager = PipPackageManager(tmp_path, runner=missing)
    assert manager.vulnerabilities() == {}

    with pytest.raises(PackageManagerError) as exc:
        manager.install("fastapi")
    assert "is not installed" in str(exc.value)


def test_install_timeout_raises(tmp_path):
    def slow(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs.get("timeout"))

    with pytest.raises(PackageManagerError) as exc:
        PipPackageManager(tmp_path, runner=slow, timeout=1).install("fastapi")
    assert "timed out" in str(exc.value)


def test_pip_install_commands(package_manager):
    assert package_manager.install_command("httpx", None)[-3:] == ["install", "-U", "httpx"]
    assert package_manager.install_command("httpx", "0.27.2")[-2:] == ["install", "httpx==0.27.2"]


def test_install_failure_carries_stderr(package_manager, runner):
    runner.responses["pip install"] = completed(returncode=1, stderr="No matching distribution\n")

    with pytest.raises(PackageManagerError) as exc:
        package_manager.install("nope", "1.0")

    assert str(exc.value) == "No matching distribution"
    assert exc.value.command[-1] == "nope==1.0"


@pytest.fixture
def npm(tmp_path, runner) -> NpmPackageManager:
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "dependencies": {"next": "^14.1.0", "lodash": "~4.17.20"},
                "devDependencies": {"eslint": "8.57.0"},
            }
        ),
        encoding="utf-8",
    )
    return NpmPackageManager(tmp_path, runner=runner)


def test_npm_manifest(npm):
    entries = {e.name: (e.version, e.is_dev) for e in npm.read_manifest()}
    assert entries == {
        "next": ("14.1.0", False),
        "lodash": ("4.17.20", False),
        "eslint": ("8.57.0", True),
    }


def test_npm_outdated_audit_and_installed_version(npm, runner):
    runner.responses["npm outdated"] = completed(
        json.dumps({"next": {"current": "14.1.0", "wanted": "14.2.0", "latest": "15.0.0"}}), returncode=1
    )
    runner.responses["npm audit"] = completed(
        json.dumps(
            {
                "vulnerabilities": {
                    "lodash": {
                        "severity": "high",
                        "via": [{"title": "Prototype Pollution", "url": "https://github.com/advisories/GHSA-x", "severity": "critical"}],
                    },
                    "chain": {"severity": "moderate", "via": ["lodash"]},
                }
            }
        ),
        returncode=1,
    )
    runner.responses["npm ls"] = completed(json.dumps({"dependencies": {"next": {"version": "15.0.0"}}}))

    assert npm.outdated()["next"].latest == "15.0.0"

    findings = npm.vulnerabilities()
    assert findings["lodash"][0]["severity"] == "critical"
    assert findings["chain"][0]["title"] == "Vulnerable dependency chain via chain"
    assert findings["chain"][0]["severity"] == "moderate"

    assert npm.install("next") == "15.0.0"
    assert ["npm", "update", "next"] in runner.calls
    assert npm.install_command("next", "15.0.0") == ["npm", "install", "next@15.0.0", "--save-exact"]


def test_build_package_manager_selects_kind():
    assert isinstance(build_package_manager("npm"), NpmPackageManager)
    assert isinstance(build_package_manager("pip"), PipPackageManager)


def test_canonical_names(tmp_path):
    pip = PipPackageManager(tmp_path, runner=FakeRunner())
    assert pip.canonical_name("SQLAlchemy") == pip.canonical_name("sqlalchemy") == "sqlalchemy"
    assert pip.canonical_name("python_dotenv") == "python-dotenv"
    assert pip.canonical_name("zope.interface") == "zope-interface"

    npm = NpmPackageManager(tmp_path, runner=FakeRunner())
    assert npm.canonical_name("@types/node") == "@types/node"
