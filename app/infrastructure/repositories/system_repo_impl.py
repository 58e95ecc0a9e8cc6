from typing import Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from app.application.exceptions import InvalidInputError, NotFoundError
from app.infrastructure.db.models import Subject, System, Marks, Question, File
from app.infrastructure.repositories.common import clean_text
from app.infrastructure.repositories.file_repo_impl import remove_blobs
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.presentation.schemas.system_schema import SystemCreate, SystemUpdate
import logging

logger = logging.getLogger(__name__)

def create_system(db: Session, system_data: SystemCreate) -> System:
    """Create a new system under an existing subject"""
    subject = db.query(Subject).filter(Subject.id == system_data.subject_id).first()
    if not subject:
        logger.warning(f"Cannot create system: subject {system_data.subject_id} not found")
        raise NotFoundError("Subject not found")

    try:
        system = System(
            name=system_data.name,
            description=clean_text(system_data.description),
            subject_id=system_data.subject_id,
        )
        db.add(system)
        db.commit()
        db.refresh(system)
        logger.info(f"Created system: {system.name} (ID: {system.id}) for subject_id: {system.subject_id}")
        return system

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating system: {e}")
        raise InvalidInputError(f"Invalid subject_id or database error: {str(e)}")
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating system: {e}", exc_info=True)
        raise

def get_systems(db: Session, subject_id: Optional[str] = None):
    """Get all systems, or the systems of one subject"""
    try:
        query = db.query(System).options(selectinload(System.marks))
        if subject_id:
            query = query.filter(System.subject_id == subject_id)
        systems = query.order_by(System.created_at.desc()).all()
        logger.info(f"Retrieved {len(systems)} systems (subject_id={subject_id})")
        return systems
    except Exception as e:
        logger.error(f"Error fetching systems for subject_id {subject_id}: {e}", exc_info=True)
        raise

def get_system_by_id(db: Session, system_id: str) -> System:
    """Get a specific system by ID"""
    system = db.query(System).filter(System.id == system_id).first()
    if not system:
        logger.warning(f"System with id {system_id} not found")
        raise NotFoundError("System not found")
    return system

def update_system(db: Session, system_id: str, system_data: SystemUpdate) -> System:
    """Update a system"""
    system = get_system_by_id(db, system_id)
    try:
        changes = system_data.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            system.name = changes["name"]
        if "description" in changes:
            system.description = clean_text(changes["description"])
        db.commit()
        db.refresh(system)
        logger.info(f"Updated system: {system.name} (ID: {system_id})")
        return system

    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error updating system {system_id}: {e}")
        raise InvalidInputError(f"Database error: {str(e)}")
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating system {system_id}: {e}", exc_info=True)
        raise

def delete_system(db: Session, system_id: str, storage: LocalFileStorage):
    """Delete a system and everything below it"""
    system = get_system_by_id(db, system_id)
    system_name = system.name
    try:
        names = [
            row.name
            for row in db.query(File.name)
            .join(Question, File.question_id == Question.id)
            .join(Marks, Question.marks_id == Marks.id)
            .filter(Marks.system_id == system_id)
            .all()
        ]
        db.delete(system)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting system {system_id}: {e}", exc_info=True)
        raise

    remove_blobs(storage, names)
    logger.info(f"Deleted system: {system_name} (ID: {system_id})")
    return {"message": "System deleted successfully"}
