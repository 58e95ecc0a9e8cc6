from fastapi import APIRouter, Depends, File as FileParam, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
from urllib.parse import quote
from app.presentation.schemas.file_schema import FileMove, FileOut
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.file_repo_impl import (
    create_file,
    get_files,
    get_file_by_id,
    move_file,
    delete_file,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileOut, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = FileParam(...),
    question_id: str = Form(...),
    folder_id: Optional[str] = Form(default=None),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    data = await file.read()
    logger.info(f"Upload received: {file.filename} ({len(data)} bytes) for question {question_id}")
    return create_file(
        db,
        storage,
        question_id=question_id,
        original_name=file.filename or "upload",
        mime_type=file.content_type or "application/octet-stream",
        data=data,
        folder_id=folder_id,
    )


@router.get("", response_model=List[FileOut])
def list_files(
    question_id: Optional[str] = Query(default=None),
    folder_id: Optional[str] = Query(default=None),
    root_only: bool = Query(default=False),
    db: Session = Depends(get_db),
):
    return get_files(db, question_id=question_id, folder_id=folder_id, root_only=root_only)


@router.get("/{file_id}", response_model=FileOut)
def get_file(file_id: str, db: Session = Depends(get_db)):
    return get_file_by_id(db, file_id)


@router.get("/{file_id}/download")
def download_file(
    file_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    record = get_file_by_id(db, file_id)
    if not storage.exists(record.name):
        logger.warning(f"Stored file missing on disk for file {file_id}: {record.name}")
        raise HTTPException(status_code=404, detail="File not found on disk")

    return Response(
        content=storage.read(record.name),
        media_type=record.mime_type,
        headers={"Content-Disposition": f"attachment; filename=\"{quote(record.original_name)}\""},
    )


@router.put("/{file_id}", response_model=FileOut)
def modify_file(file_id: str, move: FileMove, db: Session = Depends(get_db)):
    return move_file(db, file_id, move.folder_id)


@router.delete("/{file_id}")
def remove_file(
    file_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_file(db, storage, file_id)
