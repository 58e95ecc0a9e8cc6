from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.presentation.schemas.system_schema import SystemCreate, SystemUpdate, SystemOut
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.system_repo_impl import (
    create_system,
    get_systems,
    get_system_by_id,
    update_system,
    delete_system,
)

router = APIRouter(prefix="/systems", tags=["Systems"])


@router.post("", response_model=SystemOut, status_code=status.HTTP_201_CREATED)
def add_system(system: SystemCreate, db: Session = Depends(get_db)):
    return create_system(db, system)


@router.get("", response_model=List[SystemOut])
def list_systems(subject_id: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return get_systems(db, subject_id)


@router.get("/{system_id}", response_model=SystemOut)
def get_system(system_id: str, db: Session = Depends(get_db)):
    return get_system_by_id(db, system_id)


@router.put("/{system_id}", response_model=SystemOut)
def modify_system(system_id: str, system: SystemUpdate, db: Session = Depends(get_db)):
    return update_system(db, system_id, system)


@router.delete("/{system_id}")
def remove_system(
    system_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_system(db, system_id, storage)
