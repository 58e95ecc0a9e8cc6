from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.presentation.schemas.folder_schema import FolderCreate, FolderUpdate, FolderOut, FolderDetailOut
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.folder_repo_impl import (
    create_folder,
    get_folders,
    get_folder_by_id,
    update_folder,
    delete_folder,
)

router = APIRouter(prefix="/folders", tags=["Folders"])


@router.post("", response_model=FolderOut, status_code=status.HTTP_201_CREATED)
def add_folder(folder: FolderCreate, db: Session = Depends(get_db)):
    return create_folder(db, folder)


@router.get("", response_model=List[FolderOut])
def list_folders(question_id: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return get_folders(db, question_id)


@router.get("/{folder_id}", response_model=FolderDetailOut)
def get_folder(folder_id: str, db: Session = Depends(get_db)):
    return get_folder_by_id(db, folder_id)


@router.put("/{folder_id}", response_model=FolderOut)
def modify_folder(folder_id: str, folder: FolderUpdate, db: Session = Depends(get_db)):
    return update_folder(db, folder_id, folder)


@router.delete("/{folder_id}")
def remove_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_folder(db, folder_id, storage)
