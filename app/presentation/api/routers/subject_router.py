from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.presentation.schemas.subject_schema import SubjectCreate, SubjectUpdate, SubjectOut
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.subject_repo_impl import (
    create_subject,
    get_all_subjects,
    get_subject_by_id,
    update_subject,
    delete_subject,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/subjects", tags=["Subjects"])


@router.post("", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def add_subject(subject: SubjectCreate, db: Session = Depends(get_db)):
    return create_subject(db, subject)


@router.get("", response_model=List[SubjectOut])
def list_subjects(db: Session = Depends(get_db)):
    return get_all_subjects(db)


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: str, db: Session = Depends(get_db)):
    return get_subject_by_id(db, subject_id)


@router.put("/{subject_id}", response_model=SubjectOut)
def modify_subject(subject_id: str, subject: SubjectUpdate, db: Session = Depends(get_db)):
    return update_subject(db, subject_id, subject)


@router.delete("/{subject_id}")
def remove_subject(
    subject_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_subject(db, subject_id, storage)
