"""
Directory of JSON catalog snapshots.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from app.infrastructure.db.base import iso_timestamp

logger = logging.getLogger(__name__)


@dataclass
class SnapshotInfo:
    name: str
    size: int
    modified_at: datetime

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "size": self.size,
            "date": iso_timestamp(self.modified_at),
        }


class SnapshotStore:
    # The directory also holds non-snapshot JSON (the auto-backup config)
    SNAPSHOT_PREFIXES = ("backup-", "auto-backup-")

    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _path(self, name: str) -> str:
        # Snapshot names are plain file names, never paths
        if not name or name != os.path.basename(name) or name in (".", ".."):
            raise ValueError(f"Invalid snapshot name: {name!r}")
        return os.path.join(self.base_dir, name)

    def exists(self, name: str) -> bool:
        return os.path.isfile(self._path(name))

    def write(self, name: str, content: str) -> int:
        """Write a snapshot and return its size in bytes."""
        os.makedirs(self.base_dir, exist_ok=True)
        data = content.encode("utf-8")
        with open(self._path(name), "wb") as f:
            f.write(data)
        return len(data)

    def read(self, name: str) -> str:
        path = self._path(name)
        if not os.path.isfile(path):
            raise FileNotFoundError(name)
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def delete(self, name: str) -> None:
        path = self._path(name)
        if not os.path.isfile(path):
            raise FileNotFoundError(name)
        os.remove(path)
        logger.info(f"Deleted snapshot {name}")

    def list(self, prefix: Optional[str] = None) -> List[SnapshotInfo]:
        """List .json snapshots, newest first by modification time."""
        if not os.path.isdir(self.base_dir):
            return []
        snapshots = []
        for entry in os.scandir(self.base_dir):
            if not entry.is_file() or not entry.name.endswith(".json"):
                continue
            if not entry.name.startswith(prefix or self.SNAPSHOT_PREFIXES):
                continue
            stat = entry.stat()
            snapshots.append(
                SnapshotInfo(
                    name=entry.name,
                    size=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        snapshots.sort(key=lambda s: s.modified_at, reverse=True)
        return snapshots
