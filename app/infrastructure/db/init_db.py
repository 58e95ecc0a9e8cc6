import logging
import os
import threading

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings
from .base import Base
from .models import Subject

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS = [
    {
        "name": "Pathology",
        "description": "Study of disease processes, their causes, and effects on the body",
    },
    {
        "name": "Pharmacology",
        "description": "Study of drugs, their actions, uses, and adverse effects",
    },
    {
        "name": "Microbiology",
        "description": "Study of microorganisms causing human diseases",
    },
]

_init_lock = threading.Lock()
_initialized_engines = set()


def _ensure_directories(*paths: str) -> None:
    for path in paths:
        os.makedirs(path, exist_ok=True)


def _sqlite_directory(engine: Engine):
    database = engine.url.database
    if engine.dialect.name != "sqlite" or not database or database == ":memory:":
        return None
    return os.path.dirname(os.path.abspath(database))


def seed_default_subjects(db: Session) -> int:
    """Insert the default subjects when the catalog is empty. Returns rows added."""
    if db.query(Subject).count() > 0:
        return 0
    logger.info("Database is empty. Initializing with default subjects...")
    for data in DEFAULT_SUBJECTS:
        db.add(Subject(**data))
    db.commit()
    logger.info(f"Database initialized with {len(DEFAULT_SUBJECTS)} default subjects")
    return len(DEFAULT_SUBJECTS)


def ensure_database_initialized(engine: Engine, session_factory: sessionmaker, seed: bool = None) -> bool:
    """
    Create storage directories, tables and default data once per engine.

    Safe to call on every request; returns True only on the call that did the work.
    """
    if engine in _initialized_engines:
        return False

    with _init_lock:
        if engine in _initialized_engines:
            return False

        settings = get_settings()
        if seed is None:
            seed = settings.seed_default_subjects

        db_dir = _sqlite_directory(engine)
        _ensure_directories(*(p for p in (db_dir, settings.upload_dir, settings.backup_dir) if p))

        Base.metadata.create_all(bind=engine)

        if seed:
            db = session_factory()
            try:
                seed_default_subjects(db)
            except Exception as e:
                db.rollback()
                logger.error(f"Error seeding default subjects: {e}", exc_info=True)
                raise
            finally:
                db.close()

        _initialized_engines.add(engine)
        return True


def reset_initialization_state() -> None:
    """Forget which engines were initialized (used by tests)."""
    with _init_lock:
        _initialized_engines.clear()
