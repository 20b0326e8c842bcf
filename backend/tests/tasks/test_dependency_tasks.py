from portfolio.core.config import settings
from portfolio.models.dependency import Dependency
from portfolio.tasks import dependency_tasks
from portfolio.tasks.celery_app import get_beat_schedule


def test_beat_schedule_empty_when_auto_update_disabled(monkeypatch):
    monkeypatch.setattr(settings, "dependency_auto_update_enabled", False)
    assert get_beat_schedule() == {}


def test_beat_schedule_runs_daily_at_configured_hour(monkeypatch):
    monkeypatch.setattr(settings, "dependency_auto_update_enabled", True)
    monkeypatch.setattr(settings, "dependency_auto_update_cron_hour", 4)

    entry = get_beat_schedule()["dependencies-scheduled-update"]

    assert entry["task"] == "dependencies.scheduled_update"
    assert entry["schedule"].hour == {4}
    assert entry["schedule"].minute == {0}


def test_scheduled_update_skips_when_disabled(monkeypatch):
    monkeypatch.setattr(settings, "dependency_auto_update_enabled", False)

    result = dependency_tasks.run_scheduled_update()

    assert result["skipped"] is True
    assert result["updated"] == 0


def test_scheduled_update_applies_global_mode(db, monkeypatch, package_manager, runner):
    monkeypatch.setattr(settings, "dependency_auto_update_enabled", True)
    monkeypatch.setattr(dependency_tasks, "build_package_manager", lambda: package_manager)
    package_manager.installed_version = lambda name: "0.27.2"
    db.add_all(
        [
            Dependency(name="httpx", current_version="0.27.0", has_security_update=True, vulnerability_count=1),
            Dependency(name="fastapi", current_version="0.110.0", latest_version="0.115.0", outdated=True),
        ]
    )
    db.commit()

    result = dependency_tasks.run_scheduled_update()

    assert result["updated"] == 1
    assert [r["name"] for r in result["results"]] == ["httpx"]
    assert any("httpx" in call for call in runner.calls)
