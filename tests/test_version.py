from __future__ import annotations

from importlib import metadata

from infra import version as version_mod
from infra.operational_support import OperationalSupport
from infra.services import run_startup_repair


def _no_override(monkeypatch, tmp_path):
    monkeypatch.delenv("CL_APP_VERSION", raising=False)
    monkeypatch.setattr(version_mod, "_VERSION_FILE", tmp_path / "missing.txt")


def test_repair_event_carries_the_overridden_version(monkeypatch, tmp_path, services):
    monkeypatch.setenv("CL_APP_VERSION", "2.4.1")
    support = OperationalSupport(events_path=tmp_path / "support-events.jsonl")

    run_startup_repair(services["ledger_reconciler"], support=support)

    events = support.read_events(event_type="ledger.repair.completed")
    assert [e["app_version"] for e in events] == ["2.4.1"]


def test_build_stamp_wins_over_installed_distribution(monkeypatch, tmp_path):
    _no_override(monkeypatch, tmp_path)
    stamp = tmp_path / "app_version.txt"
    stamp.write_text("3.0.0-rc1\n", encoding="utf-8")
    monkeypatch.setattr(version_mod, "_VERSION_FILE", stamp)
    monkeypatch.setattr(version_mod.metadata, "version", lambda name: "1.0.0")

    assert version_mod.get_app_version() == "3.0.0-rc1"


def test_installed_distribution_version_is_used_without_stamp(monkeypatch, tmp_path):
    _no_override(monkeypatch, tmp_path)
    seen = []

    def fake_version(name):
        seen.append(name)
        return "1.7.0"

    monkeypatch.setattr(version_mod.metadata, "version", fake_version)

    assert version_mod.get_app_version() == "1.7.0"
    assert seen == [version_mod.DISTRIBUTION_NAME]


def test_uninstalled_checkout_falls_back_to_default(monkeypatch, tmp_path):
    _no_override(monkeypatch, tmp_path)

    def not_installed(name):
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(version_mod.metadata, "version", not_installed)

    assert version_mod.get_app_version() == version_mod._DEFAULT_APP_VERSION
