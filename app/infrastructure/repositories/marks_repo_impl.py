from typing import Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from app.application.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.infrastructure.db.models import System, Marks, Question, File
from app.infrastructure.repositories.common import clean_text
from app.infrastructure.repositories.file_repo_impl import remove_blobs
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.presentation.schemas.marks_schema import MarksCreate, MarksUpdate
import logging

logger = logging.getLogger(__name__)

def ensure_value_free(db: Session, system_id: str, value: int, exclude_id: Optional[str] = None):
    query = db.query(Marks).filter(Marks.system_id == system_id, Marks.value == value)
    if exclude_id:
        query = query.filter(Marks.id != exclude_id)
    if query.first():
        logger.warning(f"Duplicate marks value {value} for system_id: {system_id}")
        raise ConflictError(f"Marks with value {value} already exists for this system")

def create_marks(db: Session, marks_data: MarksCreate) -> Marks:
    """Create a marks category; its value must be unique within the system"""
    system = db.query(System).filter(System.id == marks_data.system_id).first()
    if not system:
        logger.warning(f"Cannot create marks: system {marks_data.system_id} not found")
        raise NotFoundError("System not found")

    ensure_value_free(db, marks_data.system_id, marks_data.value)

    try:
        marks = Marks(
            value=marks_data.value,
            description=clean_text(marks_data.description),
            system_id=marks_data.system_id,
        )
        db.add(marks)
        db.commit()
        db.refresh(marks)
        logger.info(f"Created marks {marks.value} (ID: {marks.id}) for system_id: {marks.system_id}")
        return marks

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating marks: {e}")
        raise InvalidInputError(f"Database error: {str(e)}")
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating marks: {e}", exc_info=True)
        raise

def get_marks(db: Session, system_id: Optional[str] = None):
    """Get marks categories ordered by value"""
    query = db.query(Marks).options(selectinload(Marks.questions))
    if system_id:
        query = query.filter(Marks.system_id == system_id)
    marks = query.order_by(Marks.value.asc()).all()
    logger.info(f"Retrieved {len(marks)} marks categories (system_id={system_id})")
    return marks

def get_marks_by_id(db: Session, marks_id: str) -> Marks:
    marks = db.query(Marks).filter(Marks.id == marks_id).first()
    if not marks:
        logger.warning(f"Marks with id {marks_id} not found")
        raise NotFoundError("Marks not found")
    return marks

def update_marks(db: Session, marks_id: str, marks_data: MarksUpdate) -> Marks:
    marks = get_marks_by_id(db, marks_id)
    changes = marks_data.model_dump(exclude_unset=True)

    new_value = changes.get("value")
    if new_value is not None and new_value != marks.value:
        ensure_value_free(db, marks.system_id, new_value, exclude_id=marks_id)

    try:
        if new_value is not None:
            marks.value = new_value
        if "description" in changes:
            marks.description = clean_text(changes["description"])
        db.commit()
        db.refresh(marks)
        logger.info(f"Updated marks {marks.value} (ID: {marks_id})")
        return marks
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating marks {marks_id}: {e}", exc_info=True)
        raise

def delete_marks(db: Session, marks_id: str, storage: LocalFileStorage):
    """Delete a marks category with its questions and their files"""
    marks = get_marks_by_id(db, marks_id)
    try:
        names = [
            row.name
            for row in db.query(File.name)
            .join(Question, File.question_id == Question.id)
            .filter(Question.marks_id == marks_id)
            .all()
        ]
        db.delete(marks)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting marks {marks_id}: {e}", exc_info=True)
        raise

    remove_blobs(storage, names)
    logger.info(f"Deleted marks ID: {marks_id}")
    return {"message": "Marks deleted successfully"}
