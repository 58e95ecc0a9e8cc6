"""
Catalog snapshots: export every entity to a JSON envelope, restore an
envelope atomically, and rotate automatically produced snapshot files.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Type

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.application.exceptions import InvalidInputError
from app.infrastructure.db.base import iso_timestamp, parse_timestamp, utcnow
from app.infrastructure.db.models import Subject, System, Marks, Question, Folder, File
from app.infrastructure.repositories.file_repo_impl import get_folder_for_question
from app.infrastructure.repositories.folder_repo_impl import ensure_name_free
from app.infrastructure.repositories.marks_repo_impl import ensure_value_free
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.storage.snapshot_store import SnapshotStore
from app.presentation.schemas.backup_schema import (
    FileExport,
    FolderExport,
    MarksExport,
    QuestionExport,
    SnapshotData,
    SnapshotRecord,
    SubjectExport,
    SystemExport,
)

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"
MANUAL = "manual"
AUTO_BACKUP = "auto-backup"
FILE_PREFIXES = {MANUAL: "backup-", AUTO_BACKUP: "auto-backup-"}

ENTITY_KEYS = ("subjects", "systems", "marks", "questions", "folders", "files")

# Restore order and, per entity, the fields set on create / refreshed on update
RESTORE_PLAN = (
    ("subjects", Subject, ("name", "description"), ("name", "description")),
    ("systems", System, ("name", "description", "subject_id"), ("name", "description")),
    ("marks", Marks, ("value", "description", "system_id"), ("value", "description")),
    (
        "questions",
        Question,
        (
            "title", "content", "terminologies", "repeat_count", "years_appeared",
            "last_appeared_year", "global_importance", "calculated_score", "marks_id",
        ),
        (
            "title", "content", "terminologies", "repeat_count", "years_appeared",
            "last_appeared_year", "global_importance", "calculated_score",
        ),
    ),
    (
        "folders",
        Folder,
        ("name", "description", "color", "icon", "question_id"),
        ("name", "description", "color", "icon"),
    ),
    (
        "files",
        File,
        ("name", "original_name", "mime_type", "size", "question_id", "folder_id"),
        ("original_name", "folder_id"),
    ),
)


def snapshot_filename(kind: str, exported_at: str) -> str:
    stamp = exported_at.replace(":", "-").replace(".", "-")
    return f"{FILE_PREFIXES[kind]}{stamp}.json"


_SNAPSHOT_NAME = re.compile(r"^(?P<stamp>.*?)(?:-(?P<suffix>\d+))?\.json$")


def snapshot_sort_key(name: str):
    """Order snapshot names by stamp, then by collision suffix (none sorts first)."""
    match = _SNAPSHOT_NAME.match(name)
    if not match:
        return name, 0
    return match.group("stamp"), int(match.group("suffix") or 0)


@dataclass
class SnapshotResult:
    success: bool
    filename: str = ""
    size: int = 0
    error: Optional[str] = None
    envelope: Optional[dict] = field(default=None, repr=False)

    def as_dict(self) -> dict:
        result = {"success": self.success, "filename": self.filename, "size": self.size}
        if self.error:
            result["error"] = self.error
        return result


class BackupService:
    def __init__(self, db: Session, store: SnapshotStore, uploads: LocalFileStorage):
        self.db = db
        self.store = store
        self.uploads = uploads

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_data(self) -> Dict[str, list]:
        """Read the whole catalog with direct relations eagerly loaded."""
        db = self.db
        subjects = db.query(Subject).options(selectinload(Subject.systems)).order_by(Subject.created_at).all()
        systems = (
            db.query(System)
            .options(joinedload(System.subject), selectinload(System.marks))
            .order_by(System.created_at)
            .all()
        )
        marks = (
            db.query(Marks)
            .options(joinedload(Marks.system), selectinload(Marks.questions))
            .order_by(Marks.created_at)
            .all()
        )
        questions = (
            db.query(Question)
            .options(joinedload(Question.marks), selectinload(Question.files), selectinload(Question.folders))
            .order_by(Question.created_at)
            .all()
        )
        folders = (
            db.query(Folder)
            .options(joinedload(Folder.question), selectinload(Folder.files))
            .order_by(Folder.created_at)
            .all()
        )
        files = (
            db.query(File)
            .options(joinedload(File.question), joinedload(File.folder))
            .order_by(File.created_at)
            .all()
        )

        def dump(schema: Type[SnapshotRecord], rows) -> list:
            return [schema.model_validate(row).model_dump(mode="json", by_alias=True) for row in rows]

        return {
            "subjects": dump(SubjectExport, subjects),
            "systems": dump(SystemExport, systems),
            "marks": dump(MarksExport, marks),
            "questions": dump(QuestionExport, questions),
            "folders": dump(FolderExport, folders),
            "files": dump(FileExport, files),
        }

    def build_envelope(self, kind: str = MANUAL, now: Optional[datetime] = None) -> dict:
        return {
            "version": SNAPSHOT_VERSION,
            "exportedAt": iso_timestamp(now or datetime.now(timezone.utc)),
            "type": kind,
            "data": self.export_data(),
        }

    def _unique_filename(self, kind: str, exported_at: str) -> str:
        filename = snapshot_filename(kind, exported_at)
        base = filename[: -len(".json")]
        suffix = 1
        while self.store.exists(filename):
            filename = f"{base}-{suffix}.json"
            suffix += 1
        return filename

    def create_snapshot(self, kind: str = MANUAL, now: Optional[datetime] = None) -> SnapshotResult:
        """Export the catalog and persist it; failures are reported, never raised."""
        try:
            envelope = self.build_envelope(kind, now)
            content = json.dumps(envelope, indent=2, ensure_ascii=False)
            filename = self._unique_filename(kind, envelope["exportedAt"])
            size = self.store.write(filename, content)
            logger.info(f"Created {kind} snapshot {filename} ({size} bytes)")
            return SnapshotResult(success=True, filename=filename, size=size, envelope=envelope)
        except Exception as e:
            logger.error(f"Snapshot export failed: {e}", exc_info=True)
            return SnapshotResult(success=False, error=str(e))

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------
    def _upsert(self, model, record: SnapshotRecord, create_fields, update_fields) -> None:
        existing = self.db.get(model, record.id)
        now = utcnow()
        if existing is None:
            values = {name: getattr(record, name) for name in create_fields}
            if model is File:
                # Blobs always resolve inside the upload directory
                values["path"] = self.uploads.path_for(record.name)
            values["id"] = record.id
            values["created_at"] = record.created_at or now
            values["updated_at"] = record.updated_at or now
            self.db.add(model(**values))
        else:
            for name in update_fields:
                setattr(existing, name, getattr(record, name))
            existing.updated_at = now
        self.db.flush()

    def _check_invariants(self, snapshot: SnapshotData) -> None:
        """Run the catalog's uniqueness and ownership checks on every restored record."""
        for record in snapshot.marks or []:
            marks = self.db.get(Marks, record.id)
            ensure_value_free(self.db, marks.system_id, marks.value, exclude_id=marks.id)
        for record in snapshot.folders or []:
            folder = self.db.get(Folder, record.id)
            ensure_name_free(self.db, folder.question_id, folder.name, exclude_id=folder.id)
        for record in snapshot.files or []:
            file = self.db.get(File, record.id)
            if file.folder_id:
                get_folder_for_question(self.db, file.folder_id, file.question_id)

    def apply_snapshot(self, data: Optional[dict], mode: str = "merge") -> Dict[str, int]:
        """
        Upsert every record of a snapshot keyed by its original id, parents
        before children, inside a single transaction.

        In "replace" mode the existing catalog is removed first (same
        transaction). Returns the number of records processed per entity.
        """
        if not data:
            raise InvalidInputError("No data provided")
        if mode not in ("merge", "replace"):
            raise InvalidInputError(f"Unknown import mode: {mode}")

        try:
            snapshot = SnapshotData.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Rejected snapshot with invalid records: {e}")
            raise InvalidInputError(f"Invalid snapshot data: {e}")

        stats = {key: 0 for key in ENTITY_KEYS}
        try:
            if mode == "replace":
                for subject in self.db.query(Subject).all():
                    self.db.delete(subject)
                self.db.flush()
                # Children were removed by the database cascade
                self.db.expunge_all()

            for key, model, create_fields, update_fields in RESTORE_PLAN:
                for record in getattr(snapshot, key) or []:
                    self._upsert(model, record, create_fields, update_fields)
                    stats[key] += 1

            self._check_invariants(snapshot)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Snapshot import failed, transaction rolled back: {e}", exc_info=True)
            raise

        logger.info(f"Imported snapshot ({mode}): {stats}")
        return stats

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------
    def prune_snapshots(
        self, max_backups: int, retention_days: int, now: Optional[datetime] = None
    ) -> List[str]:
        """
        Delete automatic snapshots older than retention_days, then keep only
        the newest max_backups of what remains. Manual snapshots are untouched.
        """
        now = now or datetime.now(timezone.utc)
        prefix = FILE_PREFIXES[AUTO_BACKUP]
        cutoff = now - timedelta(days=retention_days)
        deleted = []
        try:
            for info in self.store.list(prefix=prefix):
                if info.modified_at < cutoff:
                    self.store.delete(info.name)
                    deleted.append(info.name)

            # Timestamped names sort by creation time
            remaining = sorted(
                (info.name for info in self.store.list(prefix=prefix)), key=snapshot_sort_key, reverse=True
            )
            for name in remaining[max_backups:]:
                self.store.delete(name)
                deleted.append(name)
        except OSError as e:
            logger.error(f"Snapshot cleanup error: {e}", exc_info=True)

        if deleted:
            logger.info(f"Pruned {len(deleted)} automatic snapshots")
        return deleted

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    def counts(self) -> Dict[str, int]:
        models = (Subject, System, Marks, Question, Folder, File)
        return {
            key: self.db.query(func.count(model.id)).scalar()
            for key, model in zip(ENTITY_KEYS, models)
        }

    def status(self, database_path: Optional[str]) -> dict:
        db_exists = bool(database_path) and os.path.isfile(database_path)
        uploads_count, uploads_size = self.uploads.usage()
        return {
            "database": {
                "exists": db_exists,
                "size": os.path.getsize(database_path) if db_exists else 0,
                "path": database_path,
            },
            "uploads": {
                "count": uploads_count,
                "size": uploads_size,
                "path": self.uploads.base_dir,
            },
            "counts": self.counts(),
            "backups": [info.as_dict() for info in self.store.list()],
        }


__all__ = [
    "AUTO_BACKUP",
    "BackupService",
    "MANUAL",
    "SnapshotResult",
    "iso_timestamp",
    "parse_timestamp",
    "snapshot_filename",
    "snapshot_sort_key",
]
