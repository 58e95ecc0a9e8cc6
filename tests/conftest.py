"""
Test fixtures for the exam question bank.

Provides an isolated file-based SQLite database, upload and backup
directories under tmp_path, and a FastAPI TestClient wired to them.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("SEED_DEFAULT_SUBJECTS", "false")

from app.infrastructure.db.base import Base
from app.infrastructure.db.session import build_engine
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.storage.snapshot_store import SnapshotStore
from app.application.backup.snapshot_service import BackupService
from app.presentation.dependencies import get_db, get_file_storage, get_snapshot_store


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def snapshot_store(tmp_path):
    return SnapshotStore(str(tmp_path / "backups"))


@pytest.fixture
def backup_service(db, snapshot_store, storage):
    return BackupService(db, snapshot_store, storage)


@pytest.fixture
def client(session_factory, storage, snapshot_store):
    from main import create_app

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    app.dependency_overrides[get_snapshot_store] = lambda: snapshot_store

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def catalog(client):
    """A subject with one system, one marks category and one question."""
    subject = client.post("/subjects", json={"name": "Pathology", "description": "Disease"}).json()
    system = client.post("/systems", json={"name": "Cardiovascular", "subject_id": subject["id"]}).json()
    marks = client.post("/marks", json={"value": 10, "system_id": system["id"]}).json()
    question = client.post(
        "/questions",
        json={
            "title": "Describe the pathogenesis of atherosclerosis",
            "marks_id": marks["id"],
            "repeat_count": 2,
            "years_appeared": "2019,2021",
            "global_importance": 70,
        },
    ).json()
    return {"subject": subject, "system": system, "marks": marks, "question": question}
