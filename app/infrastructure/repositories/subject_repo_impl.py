from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from app.application.exceptions import InvalidInputError, NotFoundError
from app.infrastructure.db.models import Subject, System, Marks, Question, File
from app.infrastructure.repositories.common import clean_text
from app.infrastructure.repositories.file_repo_impl import remove_blobs
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.presentation.schemas.subject_schema import SubjectCreate, SubjectUpdate
import logging

logger = logging.getLogger(__name__)

def create_subject(db: Session, subject_data: SubjectCreate) -> Subject:
    """Create a new subject"""
    try:
        subject = Subject(
            name=subject_data.name,
            description=clean_text(subject_data.description),
        )
        db.add(subject)
        db.commit()
        db.refresh(subject)
        logger.info(f"Created subject: {subject.name} (ID: {subject.id})")
        return subject

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating subject: {e}")
        raise InvalidInputError(f"Database error: {str(e)}")
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating subject: {e}", exc_info=True)
        raise

def get_all_subjects(db: Session):
    """Get all subjects, newest first"""
    try:
        subjects = (
            db.query(Subject)
            .options(selectinload(Subject.systems))
            .order_by(Subject.created_at.desc())
            .all()
        )
        logger.info(f"Retrieved {len(subjects)} subjects")
        return subjects
    except Exception as e:
        logger.error(f"Error fetching subjects: {e}", exc_info=True)
        raise

def get_subject_by_id(db: Session, subject_id: str) -> Subject:
    """Get a specific subject by ID"""
    subject = db.query(Subject).filter(Subject.id == subject_id).first()
    if not subject:
        logger.warning(f"Subject with id {subject_id} not found")
        raise NotFoundError("Subject not found")
    return subject

def update_subject(db: Session, subject_id: str, subject_data: SubjectUpdate) -> Subject:
    """Update a subject"""
    subject = get_subject_by_id(db, subject_id)
    try:
        changes = subject_data.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            subject.name = changes["name"]
        if "description" in changes:
            subject.description = clean_text(changes["description"])
        db.commit()
        db.refresh(subject)
        logger.info(f"Updated subject: {subject.name} (ID: {subject_id})")
        return subject

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error updating subject {subject_id}: {e}")
        raise InvalidInputError(f"Database error: {str(e)}")
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating subject {subject_id}: {e}", exc_info=True)
        raise

def delete_subject(db: Session, subject_id: str, storage: LocalFileStorage):
    """Delete a subject together with its systems, marks, questions, folders and files"""
    subject = get_subject_by_id(db, subject_id)
    subject_name = subject.name
    try:
        names = [
            row.name
            for row in db.query(File.name)
            .join(Question, File.question_id == Question.id)
            .join(Marks, Question.marks_id == Marks.id)
            .join(System, Marks.system_id == System.id)
            .filter(System.subject_id == subject_id)
            .all()
        ]
        db.delete(subject)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting subject {subject_id}: {e}", exc_info=True)
        raise

    remove_blobs(storage, names)
    logger.info(f"Deleted subject: {subject_name} (ID: {subject_id}), removed {len(names)} stored files")
    return {"message": "Subject deleted successfully"}
