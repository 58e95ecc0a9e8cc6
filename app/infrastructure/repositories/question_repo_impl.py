from typing import List, Optional
import logging
from sqlalchemy.orm import Session, joinedload, selectinload
from app.application.exceptions import NotFoundError
from app.application.scoring.importance import calculate_importance_score, last_appeared_year
from app.infrastructure.db.models import Marks, System, Question, File
from app.infrastructure.repositories.common import clean_text
from app.infrastructure.repositories.file_repo_impl import remove_blobs
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.presentation.schemas.question_schema import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 30


def _apply_scoring(question: Question) -> None:
    """Recompute the derived tracking fields from the stored inputs."""
    question.last_appeared_year = last_appeared_year(question.years_appeared)
    question.calculated_score = calculate_importance_score(
        question.repeat_count,
        question.years_appeared,
        question.global_importance,
    )


def create_question(db: Session, question_data: QuestionCreate) -> Question:
    marks = db.query(Marks).filter(Marks.id == question_data.marks_id).first()
    if not marks:
        logger.warning(f"Cannot create question: marks {question_data.marks_id} not found")
        raise NotFoundError("Marks not found")

    try:
        question = Question(
            title=question_data.title,
            content=clean_text(question_data.content),
            terminologies=clean_text(question_data.terminologies),
            marks_id=question_data.marks_id,
            repeat_count=question_data.repeat_count,
            years_appeared=question_data.years_appeared,
            global_importance=question_data.global_importance,
        )
        _apply_scoring(question)
        db.add(question)
        db.commit()
        db.refresh(question)
        logger.info(
            f"Created question {question.id} for marks_id={question.marks_id} "
            f"with score={question.calculated_score}"
        )
        return question
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating question: {e}", exc_info=True)
        raise


def get_questions(db: Session, marks_id: Optional[str] = None) -> List[Question]:
    """
    Questions of one marks category ranked by score, or every question
    newest first.
    """
    query = db.query(Question).options(selectinload(Question.files))
    if marks_id:
        query = query.filter(Question.marks_id == marks_id).order_by(
            Question.calculated_score.desc(), Question.created_at.desc()
        )
    else:
        query = query.options(joinedload(Question.marks)).order_by(Question.created_at.desc())
    questions = query.all()
    logger.info(f"Retrieved {len(questions)} questions (marks_id={marks_id})")
    return questions


def get_featured_questions(db: Session, subject_id: str, limit: int = FEATURED_LIMIT) -> List[Question]:
    """Top scored questions across every system of a subject."""
    questions = (
        db.query(Question)
        .join(Marks, Question.marks_id == Marks.id)
        .join(System, Marks.system_id == System.id)
        .filter(System.subject_id == subject_id)
        .options(joinedload(Question.marks).joinedload(Marks.system), selectinload(Question.files))
        .order_by(Question.calculated_score.desc(), Question.repeat_count.desc())
        .limit(limit)
        .all()
    )
    logger.info(f"Retrieved {len(questions)} featured questions for subject_id={subject_id}")
    return questions


def get_question_by_id(db: Session, question_id: str) -> Question:
    question = db.query(Question).filter(Question.id == question_id).first()
    if not question:
        logger.warning(f"Question not found: question_id={question_id}")
        raise NotFoundError("Question not found")
    return question


def update_question(db: Session, question_id: str, question_data: QuestionUpdate) -> Question:
    """Update a question; score and last appeared year are always recomputed"""
    question = get_question_by_id(db, question_id)
    changes = question_data.model_dump(exclude_unset=True)

    try:
        if changes.get("title") is not None:
            question.title = changes["title"]
        for field in ("content", "terminologies"):
            if field in changes:
                setattr(question, field, clean_text(changes[field]))
        for field in ("repeat_count", "years_appeared", "global_importance"):
            if changes.get(field) is not None:
                setattr(question, field, changes[field])

        _apply_scoring(question)
        db.commit()
        db.refresh(question)
        logger.info(f"Updated question {question_id}, score={question.calculated_score}")
        return question
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating question {question_id}: {e}", exc_info=True)
        raise


def delete_question(db: Session, question_id: str, storage: LocalFileStorage):
    question = get_question_by_id(db, question_id)
    try:
        names = [row.name for row in db.query(File.name).filter(File.question_id == question_id).all()]
        db.delete(question)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting question {question_id}: {e}", exc_info=True)
        raise

    remove_blobs(storage, names)
    logger.info(f"Deleted question {question_id} and {len(names)} stored files")
    return {"message": "Question deleted successfully"}
