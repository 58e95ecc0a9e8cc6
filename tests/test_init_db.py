"""Tests for lazy database initialization and default seeding."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker

from app.infrastructure.db.init_db import (
    DEFAULT_SUBJECTS,
    ensure_database_initialized,
    reset_initialization_state,
    seed_default_subjects,
)
from app.infrastructure.db.models import Subject
from app.infrastructure.db.session import build_engine

TABLES = {"subjects", "systems", "marks", "questions", "folders", "files"}


@pytest.fixture(autouse=True)
def clean_state(tmp_path, monkeypatch):
    # Relative upload/backup directories land in tmp_path
    monkeypatch.chdir(tmp_path)
    reset_initialization_state()
    yield
    reset_initialization_state()


@pytest.fixture
def fresh_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'data' / 'bank.db'}")
    yield engine
    engine.dispose()


def _subject_count(factory):
    db = factory()
    try:
        return db.query(Subject).count()
    finally:
        db.close()


def test_first_call_creates_tables_and_seeds(fresh_engine):
    factory = sessionmaker(bind=fresh_engine)

    assert ensure_database_initialized(fresh_engine, factory, seed=True) is True

    assert TABLES <= set(inspect(fresh_engine).get_table_names())
    db = factory()
    try:
        names = sorted(subject.name for subject in db.query(Subject).all())
    finally:
        db.close()
    assert names == sorted(data["name"] for data in DEFAULT_SUBJECTS)


def test_second_call_is_a_no_op(fresh_engine):
    factory = sessionmaker(bind=fresh_engine)
    ensure_database_initialized(fresh_engine, factory, seed=True)

    assert ensure_database_initialized(fresh_engine, factory, seed=True) is False
    assert _subject_count(factory) == 3


def test_reinitializing_does_not_duplicate_seed(fresh_engine):
    factory = sessionmaker(bind=fresh_engine)
    ensure_database_initialized(fresh_engine, factory, seed=True)
    reset_initialization_state()

    assert ensure_database_initialized(fresh_engine, factory, seed=True) is True
    assert _subject_count(factory) == 3

    db = factory()
    try:
        assert seed_default_subjects(db) == 0
    finally:
        db.close()


def test_seed_can_be_disabled(fresh_engine):
    factory = sessionmaker(bind=fresh_engine)

    assert ensure_database_initialized(fresh_engine, factory, seed=False) is True

    assert TABLES <= set(inspect(fresh_engine).get_table_names())
    assert _subject_count(factory) == 0
