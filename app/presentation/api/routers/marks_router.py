from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.presentation.schemas.marks_schema import MarksCreate, MarksUpdate, MarksOut
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.marks_repo_impl import (
    create_marks,
    get_marks,
    get_marks_by_id,
    update_marks,
    delete_marks,
)

router = APIRouter(prefix="/marks", tags=["Marks"])


@router.post("", response_model=MarksOut, status_code=status.HTTP_201_CREATED)
def add_marks(marks: MarksCreate, db: Session = Depends(get_db)):
    return create_marks(db, marks)


@router.get("", response_model=List[MarksOut])
def list_marks(system_id: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return get_marks(db, system_id)


@router.get("/{marks_id}", response_model=MarksOut)
def get_marks_category(marks_id: str, db: Session = Depends(get_db)):
    return get_marks_by_id(db, marks_id)


@router.put("/{marks_id}", response_model=MarksOut)
def modify_marks(marks_id: str, marks: MarksUpdate, db: Session = Depends(get_db)):
    return update_marks(db, marks_id, marks)


@router.delete("/{marks_id}")
def remove_marks(
    marks_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_marks(db, marks_id, storage)
