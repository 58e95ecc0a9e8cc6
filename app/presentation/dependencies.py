import os
import logging
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.session import SessionLocal, engine
from app.infrastructure.db.init_db import ensure_database_initialized
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.storage.snapshot_store import SnapshotStore
from app.application.backup.snapshot_service import BackupService
from app.application.backup.auto_backup import AutoBackupConfigStore, AutoBackupService, CONFIG_FILENAME

logger = logging.getLogger(__name__)


def get_db():
    # Schema and default data are created lazily on first use
    ensure_database_initialized(engine, SessionLocal)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage(get_settings().upload_dir)


def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore(get_settings().backup_dir)


def get_database_path():
    """Filesystem path of the database for file-backed SQLite, else None."""
    url = engine.url
    if engine.dialect.name != "sqlite" or not url.database or url.database == ":memory:":
        return None
    return os.path.abspath(url.database)


def get_backup_service(
    db: Session = Depends(get_db),
    store: SnapshotStore = Depends(get_snapshot_store),
    uploads: LocalFileStorage = Depends(get_file_storage),
) -> BackupService:
    return BackupService(db, store, uploads)


def get_auto_backup_service(
    backups: BackupService = Depends(get_backup_service),
) -> AutoBackupService:
    config_path = os.path.join(backups.store.base_dir, CONFIG_FILENAME)
    return AutoBackupService(backups, AutoBackupConfigStore(config_path))
