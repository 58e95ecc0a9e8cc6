import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    upload_dir: str
    backup_dir: str
    seed_default_subjects: bool
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings built from the environment (.env is honoured)."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./db/custom.db"),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        backup_dir=os.getenv("BACKUP_DIR", "backups"),
        seed_default_subjects=_env_flag("SEED_DEFAULT_SUBJECTS", "true"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
