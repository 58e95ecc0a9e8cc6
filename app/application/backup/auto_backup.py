"""
Polled auto-backup schedule.

There is no server-side timer: clients call check() periodically and a
snapshot is taken whenever the configured interval has elapsed.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from app.application.backup.snapshot_service import (
    AUTO_BACKUP,
    FILE_PREFIXES,
    BackupService,
    iso_timestamp,
    parse_timestamp,
)
from app.presentation.schemas.backup_schema import AutoBackupConfigUpdate

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

INTERVAL_RANGE = (5, 1440)  # minutes
MAX_BACKUPS_RANGE = (1, 100)
RETENTION_DAYS_RANGE = (1, 365)


def _clamp(value: int, bounds) -> int:
    low, high = bounds
    return max(low, min(high, value))


class AutoBackupConfig(BaseModel):
    auto_backup_enabled: bool = True
    backup_interval: int = 30
    last_backup: Optional[str] = None
    next_backup: Optional[str] = None
    max_backups: int = 20
    retention_days: int = 30

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class AutoBackupConfigStore:
    """Reads and writes the schedule as a small JSON file next to the snapshots."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> AutoBackupConfig:
        if not os.path.isfile(self.path):
            return AutoBackupConfig()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return AutoBackupConfig.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Unreadable auto-backup config at {self.path}, using defaults: {e}")
            return AutoBackupConfig()

    def save(self, config: AutoBackupConfig) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(config.to_document(), f, indent=2)


class AutoBackupService:
    def __init__(self, backups: BackupService, config_store: AutoBackupConfigStore):
        self.backups = backups
        self.config_store = config_store

    def _is_due(self, config: AutoBackupConfig, now: datetime) -> bool:
        next_backup = parse_timestamp(config.next_backup)
        return next_backup is None or now >= next_backup

    def _record_backup(self, config: AutoBackupConfig, now: datetime) -> None:
        config.last_backup = iso_timestamp(now)
        config.next_backup = iso_timestamp(now + timedelta(minutes=config.backup_interval))
        self.config_store.save(config)
        self.backups.prune_snapshots(config.max_backups, config.retention_days, now=now)

    def status(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)
        config = self.config_store.load()
        should_backup = bool(
            config.auto_backup_enabled and config.next_backup and self._is_due(config, now)
        )
        auto_backups = self.backups.store.list(prefix=FILE_PREFIXES[AUTO_BACKUP])
        return {
            "config": config.to_document(),
            "autoBackups": [info.as_dict() for info in auto_backups],
            "shouldBackup": should_backup,
            "currentTime": iso_timestamp(now),
        }

    def check(self, now: Optional[datetime] = None) -> dict:
        """Take an automatic snapshot if the schedule says one is due."""
        now = now or datetime.now(timezone.utc)
        config = self.config_store.load()

        if not config.auto_backup_enabled:
            return {"needsBackup": False, "message": "Auto-backup disabled"}

        if not self._is_due(config, now):
            return {
                "needsBackup": False,
                "nextBackup": config.next_backup,
                "lastBackup": config.last_backup,
            }

        result = self.backups.create_snapshot(AUTO_BACKUP, now=now)
        if not result.success:
            logger.warning(f"Scheduled auto-backup failed: {result.error}")
            return {"needsBackup": True, "backupCreated": False, "error": result.error}

        self._record_backup(config, now)
        logger.info(f"Scheduled auto-backup written: {result.filename}")
        return {
            "needsBackup": True,
            "backupCreated": True,
            "backup": result.as_dict(),
            "config": config.to_document(),
        }

    def run_now(self, now: Optional[datetime] = None) -> dict:
        """Take an automatic snapshot immediately and restart the interval."""
        now = now or datetime.now(timezone.utc)
        result = self.backups.create_snapshot(AUTO_BACKUP, now=now)
        if not result.success:
            return {"success": False, "error": result.error}

        config = self.config_store.load()
        self._record_backup(config, now)
        return {"success": True, "backup": result.as_dict(), "config": config.to_document()}

    def update_config(self, changes: AutoBackupConfigUpdate, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)
        config = self.config_store.load()

        if changes.auto_backup_enabled is not None:
            config.auto_backup_enabled = changes.auto_backup_enabled
        if changes.backup_interval is not None:
            config.backup_interval = _clamp(changes.backup_interval, INTERVAL_RANGE)
        if changes.max_backups is not None:
            config.max_backups = _clamp(changes.max_backups, MAX_BACKUPS_RANGE)
        if changes.retention_days is not None:
            config.retention_days = _clamp(changes.retention_days, RETENTION_DAYS_RANGE)

        if config.auto_backup_enabled and not config.next_backup:
            config.next_backup = iso_timestamp(now + timedelta(minutes=config.backup_interval))
        elif not config.auto_backup_enabled:
            config.next_backup = None

        self.config_store.save(config)
        logger.info(f"Auto-backup config updated: {config.to_document()}")
        return {"success": True, "config": config.to_document()}
