from types import SimpleNamespace

import pytest

from portfolio.services.dependency_service import (
    _normalize_severity,
    _remediation,
    _worst_severity,
    calculate_security_score,
    effective_mode,
    select_for_update,
    should_update,
)


def _dep(**overrides):
    values = {
        "name": "pkg",
        "current_version": "1.2.0",
        "latest_version": "1.4.0",
        "outdated": True,
        "has_security_update": False,
        "update_mode": "global",
        "locked": False,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_security_score_empty_is_perfect():
    assert calculate_security_score([]) == 100


def test_security_score_weights_vulnerable_and_outdated():
    deps = [
        {"has_security_update": True, "outdated": True},
        {"has_security_update": False, "outdated": True},
        {"has_security_update": False, "outdated": False},
        {"has_security_update": False, "outdated": False},
    ]
    # 100 - 0.25 * 50 - 0.5 * 20 = 77.5
    assert calculate_security_score(deps) == 78


def test_security_score_never_negative():
    deps = [_dep(has_security_update=True, outdated=True) for _ in range(3)]
    assert calculate_security_score(deps) == 30


def test_effective_mode_inherits_global():
    assert effective_mode(_dep(update_mode="global"), "auto") == "auto"
    assert effective_mode(_dep(update_mode="manual"), "auto") == "manual"
    assert effective_mode(_dep(update_mode=None), "conservative") == "conservative"


@pytest.mark.parametrize(
    "mode, dep_kwargs, expected",
    [
        ("auto", {}, True),
        ("auto", {"outdated": False}, False),
        ("auto", {"locked": True}, False),
        ("auto-minor", {}, True),
        ("auto-minor", {"latest_version": "2.0.0"}, False),
        ("auto-minor", {"current_version": None}, False),
        ("conservative", {}, False),
        ("conservative", {"has_security_update": True}, True),
        ("conservative", {"outdated": False, "has_security_update": True}, True),
        ("manual", {"has_security_update": True}, False),
    ],
)
def test_should_update_by_mode(mode, dep_kwargs, expected):
    assert should_update(_dep(**dep_kwargs), mode) is expected


def test_select_for_update_mixes_row_and_global_modes():
    deps = [
        _dep(name="a", update_mode="global"),
        _dep(name="b", update_mode="manual"),
        _dep(name="c", update_mode="auto"),
        _dep(name="d", update_mode="global", locked=True),
    ]
    assert [dep.name for dep in select_for_update(deps, "auto-minor")] == ["a", "c"]


def test_severity_helpers():
    assert _normalize_severity("Moderate") == "medium"
    assert _normalize_severity("unknown") is None
    assert _worst_severity([{"severity": "low"}, {"severity": "critical"}]) == "critical"
    assert _worst_severity([{"severity": None}]) == "high"


def test_remediation_prefers_highest_fix_version():
    advisories = [{"fix_versions": ["1.2.1"]}, {"fix_versions": ["1.3.0", "1.2.1"]}]
    assert _remediation("pkg", advisories) == "Upgrade pkg to 1.3.0 or later"
    assert _remediation("pkg", [{}]) == "Upgrade pkg to the latest release"
