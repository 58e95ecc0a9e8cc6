from typing import Optional
from sqlalchemy.orm import Session, selectinload
from app.application.exceptions import ConflictError, NotFoundError
from app.infrastructure.db.models import Folder, Question, File
from app.infrastructure.repositories.common import clean_text
from app.infrastructure.repositories.file_repo_impl import remove_blobs
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.presentation.schemas.folder_schema import FolderCreate, FolderUpdate
import logging

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "blue"
DEFAULT_ICON = "folder"

def ensure_name_free(db: Session, question_id: str, name: str, exclude_id: Optional[str] = None):
    query = db.query(Folder).filter(Folder.question_id == question_id, Folder.name == name)
    if exclude_id:
        query = query.filter(Folder.id != exclude_id)
    if query.first():
        logger.warning(f"Duplicate folder name '{name}' for question_id: {question_id}")
        raise ConflictError("A folder with this name already exists for this question")

def create_folder(db: Session, folder_data: FolderCreate) -> Folder:
    question = db.query(Question).filter(Question.id == folder_data.question_id).first()
    if not question:
        logger.warning(f"Cannot create folder: question {folder_data.question_id} not found")
        raise NotFoundError("Question not found")

    ensure_name_free(db, folder_data.question_id, folder_data.name)

    try:
        folder = Folder(
            name=folder_data.name,
            description=clean_text(folder_data.description),
            color=folder_data.color or DEFAULT_COLOR,
            icon=folder_data.icon or DEFAULT_ICON,
            question_id=folder_data.question_id,
        )
        db.add(folder)
        db.commit()
        db.refresh(folder)
        logger.info(f"Created folder '{folder.name}' (ID: {folder.id}) for question_id: {folder.question_id}")
        return folder
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating folder: {e}", exc_info=True)
        raise

def get_folders(db: Session, question_id: Optional[str] = None):
    """Folders of a question in creation order, or all folders newest first"""
    query = db.query(Folder).options(selectinload(Folder.files))
    if question_id:
        query = query.filter(Folder.question_id == question_id).order_by(Folder.created_at.asc())
    else:
        query = query.order_by(Folder.created_at.desc())
    folders = query.all()
    logger.info(f"Retrieved {len(folders)} folders (question_id={question_id})")
    return folders

def get_folder_by_id(db: Session, folder_id: str) -> Folder:
    folder = db.query(Folder).filter(Folder.id == folder_id).first()
    if not folder:
        logger.warning(f"Folder with id {folder_id} not found")
        raise NotFoundError("Folder not found")
    return folder

def update_folder(db: Session, folder_id: str, folder_data: FolderUpdate) -> Folder:
    folder = get_folder_by_id(db, folder_id)
    changes = folder_data.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name and new_name != folder.name:
        ensure_name_free(db, folder.question_id, new_name, exclude_id=folder_id)

    try:
        if new_name:
            folder.name = new_name
        if "description" in changes:
            folder.description = clean_text(changes["description"])
        if changes.get("color"):
            folder.color = changes["color"]
        if changes.get("icon"):
            folder.icon = changes["icon"]
        db.commit()
        db.refresh(folder)
        logger.info(f"Updated folder '{folder.name}' (ID: {folder_id})")
        return folder
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating folder {folder_id}: {e}", exc_info=True)
        raise

def delete_folder(db: Session, folder_id: str, storage: LocalFileStorage):
    """Delete a folder together with the files inside it"""
    folder = get_folder_by_id(db, folder_id)
    try:
        names = [row.name for row in db.query(File.name).filter(File.folder_id == folder_id).all()]
        db.delete(folder)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting folder {folder_id}: {e}", exc_info=True)
        raise

    remove_blobs(storage, names)
    logger.info(f"Deleted folder {folder_id} and {len(names)} stored files")
    return {"message": "Folder deleted successfully"}
