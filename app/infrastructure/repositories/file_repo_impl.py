from typing import Iterable, Optional
from sqlalchemy.orm import Session
from app.application.exceptions import InvalidInputError, NotFoundError
from app.infrastructure.db.models import File, Folder, Question
from app.infrastructure.storage.file_storage import LocalFileStorage
import logging

logger = logging.getLogger(__name__)

# Allowed upload types and their extensions
ALLOWED_TYPES = {
    "application/pdf": [".pdf"],
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": [".docx"],
    "application/msword": [".doc"],
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": [".pptx"],
    "application/vnd.ms-powerpoint": [".ppt"],
    "image/png": [".png"],
    "image/jpeg": [".jpg", ".jpeg"],
    "image/gif": [".gif"],
}


def remove_blobs(storage: LocalFileStorage, names: Iterable[str]) -> int:
    """Delete stored blobs after their rows are gone; returns how many were removed."""
    removed = 0
    for name in names:
        if storage.delete(name):
            removed += 1
    return removed


def get_folder_for_question(db: Session, folder_id: str, question_id: str) -> Folder:
    folder = db.query(Folder).filter(Folder.id == folder_id).first()
    if not folder:
        logger.warning(f"Folder with id {folder_id} not found")
        raise NotFoundError("Folder not found")
    if folder.question_id != question_id:
        logger.warning(f"Folder {folder_id} does not belong to question {question_id}")
        raise InvalidInputError("Folder does not belong to this question")
    return folder


def create_file(
    db: Session,
    storage: LocalFileStorage,
    question_id: str,
    original_name: str,
    mime_type: str,
    data: bytes,
    folder_id: Optional[str] = None,
) -> File:
    """Validate and store an uploaded file, then record its metadata"""
    question = db.query(Question).filter(Question.id == question_id).first()
    if not question:
        logger.warning(f"Upload rejected: question {question_id} not found")
        raise NotFoundError("Question not found")

    if folder_id:
        get_folder_for_question(db, folder_id, question_id)

    if mime_type not in ALLOWED_TYPES:
        logger.warning(f"Upload rejected: file type {mime_type} not allowed")
        raise InvalidInputError(
            f'File type "{mime_type}" is not allowed. '
            "Allowed types: PDF, DOCX, images (PNG, JPG, JPEG, GIF), PPT/PPTX"
        )

    blob = storage.save(original_name, data)
    try:
        record = File(
            name=blob.name,
            original_name=original_name,
            mime_type=mime_type,
            size=blob.size,
            path=blob.path,
            question_id=question_id,
            folder_id=folder_id or None,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(f"Created file record {record.id} for question {question_id}")
        return record
    except Exception as e:
        db.rollback()
        storage.delete(blob.name)
        logger.error(f"Error saving file metadata for {original_name}: {e}", exc_info=True)
        raise


def get_files(
    db: Session,
    question_id: Optional[str] = None,
    folder_id: Optional[str] = None,
    root_only: bool = False,
):
    """List files, newest first, optionally by folder or question"""
    query = db.query(File)
    if folder_id:
        query = query.filter(File.folder_id == folder_id)
    elif question_id:
        query = query.filter(File.question_id == question_id)
        if root_only:
            query = query.filter(File.folder_id.is_(None))
    files = query.order_by(File.created_at.desc()).all()
    logger.info(f"Retrieved {len(files)} files")
    return files


def get_file_by_id(db: Session, file_id: str) -> File:
    file = db.query(File).filter(File.id == file_id).first()
    if not file:
        logger.warning(f"File with id {file_id} not found")
        raise NotFoundError("File not found")
    return file


def move_file(db: Session, file_id: str, folder_id: Optional[str]) -> File:
    """Move a file into one of its question's folders, or back to the root"""
    file = get_file_by_id(db, file_id)
    if folder_id:
        get_folder_for_question(db, folder_id, file.question_id)
    try:
        file.folder_id = folder_id or None
        db.commit()
        db.refresh(file)
        logger.info(f"Moved file {file_id} to folder {file.folder_id or 'root'}")
        return file
    except Exception as e:
        db.rollback()
        logger.error(f"Error moving file {file_id}: {e}", exc_info=True)
        raise


def delete_file(db: Session, storage: LocalFileStorage, file_id: str):
    file = get_file_by_id(db, file_id)
    name = file.name
    try:
        db.delete(file)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting file {file_id}: {e}", exc_info=True)
        raise
    storage.delete(name)
    logger.info(f"Deleted file {file_id}")
    return {"message": "File deleted successfully"}
