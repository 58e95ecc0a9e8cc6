"""Tests for the polled auto-backup schedule."""

import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from app.application.backup.auto_backup import (
    CONFIG_FILENAME,
    AutoBackupConfigStore,
    AutoBackupService,
)
from app.application.backup.snapshot_service import SnapshotResult
from app.presentation.schemas.backup_schema import AutoBackupConfigUpdate

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def config_store(snapshot_store):
    return AutoBackupConfigStore(os.path.join(snapshot_store.base_dir, CONFIG_FILENAME))


@pytest.fixture
def auto_backup(backup_service, config_store):
    return AutoBackupService(backup_service, config_store)


def auto_snapshots(snapshot_store):
    return snapshot_store.list(prefix="auto-backup-")


class TestConfig:
    def test_defaults_when_missing(self, config_store):
        config = config_store.load()
        assert config.auto_backup_enabled is True
        assert config.backup_interval == 30
        assert config.max_backups == 20
        assert config.retention_days == 30
        assert config.next_backup is None

    def test_defaults_when_unreadable(self, config_store):
        os.makedirs(os.path.dirname(config_store.path), exist_ok=True)
        with open(config_store.path, "w") as f:
            f.write("{not json")
        assert config_store.load().backup_interval == 30

    def test_saved_with_camel_case_keys(self, auto_backup, config_store):
        auto_backup.update_config(AutoBackupConfigUpdate(backup_interval=60), now=NOW)
        with open(config_store.path) as f:
            document = json.load(f)
        assert document["backupInterval"] == 60
        assert document["autoBackupEnabled"] is True
        assert document["nextBackup"] == "2024-05-01T13:00:00.000Z"

    def test_values_are_clamped(self, auto_backup):
        result = auto_backup.update_config(
            AutoBackupConfigUpdate(backup_interval=1, max_backups=500, retention_days=0), now=NOW
        )
        config = result["config"]
        assert config["backupInterval"] == 5
        assert config["maxBackups"] == 100
        assert config["retentionDays"] == 1

        config = auto_backup.update_config(AutoBackupConfigUpdate(backup_interval=10_000), now=NOW)["config"]
        assert config["backupInterval"] == 1440

    def test_disable_clears_next_backup(self, auto_backup):
        auto_backup.update_config(AutoBackupConfigUpdate(auto_backup_enabled=True), now=NOW)
        config = auto_backup.update_config(AutoBackupConfigUpdate(auto_backup_enabled=False), now=NOW)["config"]
        assert config["autoBackupEnabled"] is False
        assert config["nextBackup"] is None

    def test_enable_schedules_next_backup(self, auto_backup):
        auto_backup.update_config(AutoBackupConfigUpdate(auto_backup_enabled=False), now=NOW)
        later = NOW + timedelta(hours=2)
        config = auto_backup.update_config(AutoBackupConfigUpdate(auto_backup_enabled=True), now=later)["config"]
        assert config["nextBackup"] == "2024-05-01T14:30:00.000Z"


class TestCheck:
    def test_disabled_never_backs_up(self, auto_backup, snapshot_store):
        auto_backup.update_config(AutoBackupConfigUpdate(auto_backup_enabled=False), now=NOW)
        result = auto_backup.check(now=NOW + timedelta(days=1))
        assert result["needsBackup"] is False
        assert auto_snapshots(snapshot_store) == []

    def test_first_check_backs_up_immediately(self, auto_backup, snapshot_store):
        result = auto_backup.check(now=NOW)
        assert result["needsBackup"] is True
        assert result["backupCreated"] is True
        assert result["backup"]["filename"].startswith("auto-backup-2024-05-01T12-00-00-000Z")
        assert result["config"]["lastBackup"] == "2024-05-01T12:00:00.000Z"
        assert result["config"]["nextBackup"] == "2024-05-01T12:30:00.000Z"
        assert len(auto_snapshots(snapshot_store)) == 1

    def test_not_due_is_a_no_op(self, auto_backup, snapshot_store):
        auto_backup.check(now=NOW)
        result = auto_backup.check(now=NOW + timedelta(minutes=10))
        assert result == {
            "needsBackup": False,
            "nextBackup": "2024-05-01T12:30:00.000Z",
            "lastBackup": "2024-05-01T12:00:00.000Z",
        }
        assert len(auto_snapshots(snapshot_store)) == 1

    def test_due_again_after_interval(self, auto_backup, snapshot_store):
        auto_backup.check(now=NOW)
        result = auto_backup.check(now=NOW + timedelta(minutes=30))
        assert result["backupCreated"] is True
        assert result["config"]["nextBackup"] == "2024-05-01T13:00:00.000Z"
        assert len(auto_snapshots(snapshot_store)) == 2

    def test_failed_export_leaves_schedule_untouched(self, auto_backup, config_store, monkeypatch):
        monkeypatch.setattr(
            auto_backup.backups,
            "create_snapshot",
            lambda kind, now=None: SnapshotResult(success=False, error="disk full"),
        )
        result = auto_backup.check(now=NOW)
        assert result == {"needsBackup": True, "backupCreated": False, "error": "disk full"}
        assert config_store.load().last_backup is None

    def test_rotation_applied_after_backup(self, auto_backup, snapshot_store):
        auto_backup.update_config(AutoBackupConfigUpdate(max_backups=2, backup_interval=5), now=NOW)
        for step in range(4):
            auto_backup.check(now=NOW + timedelta(minutes=5 * (step + 1)))
        names = [info.name for info in auto_snapshots(snapshot_store)]
        assert sorted(names) == [
            "auto-backup-2024-05-01T12-15-00-000Z.json",
            "auto-backup-2024-05-01T12-20-00-000Z.json",
        ]


class TestRunNowAndStatus:
    def test_run_now_ignores_schedule(self, auto_backup, snapshot_store):
        auto_backup.check(now=NOW)
        result = auto_backup.run_now(now=NOW + timedelta(minutes=1))
        assert result["success"] is True
        assert result["config"]["nextBackup"] == "2024-05-01T12:31:00.000Z"
        assert len(auto_snapshots(snapshot_store)) == 2

    def test_status(self, auto_backup):
        auto_backup.check(now=NOW)
        status = auto_backup.status(now=NOW + timedelta(hours=1))
        assert status["shouldBackup"] is True
        assert status["currentTime"] == "2024-05-01T13:00:00.000Z"
        assert len(status["autoBackups"]) == 1

        assert auto_backup.status(now=NOW)["shouldBackup"] is False


class TestAutoBackupApi:
    def test_config_and_update(self, client):
        resp = client.get("/autobackup", params={"action": "config"})
        assert resp.status_code == 200
        assert resp.json()["config"]["backupInterval"] == 30

        resp = client.post("/autobackup", json={"backupInterval": 2, "maxBackups": 3})
        assert resp.status_code == 200
        assert resp.json()["config"]["backupInterval"] == 5
        assert resp.json()["config"]["maxBackups"] == 3

    def test_check_and_now(self, client, catalog, snapshot_store):
        first = client.get("/autobackup", params={"action": "check"}).json()
        assert first["backupCreated"] is True
        second = client.get("/autobackup", params={"action": "check"}).json()
        assert second["needsBackup"] is False

        forced = client.get("/autobackup", params={"action": "now"})
        assert forced.status_code == 200
        assert len(auto_snapshots(snapshot_store)) == 2

    def test_unknown_action(self, client):
        assert client.get("/autobackup", params={"action": "explode"}).status_code == 400
