from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.presentation.schemas.question_schema import (
    QuestionCreate,
    QuestionUpdate,
    QuestionOut,
    QuestionDetailOut,
    FeaturedQuestionOut,
)
from app.presentation.dependencies import get_db, get_file_storage
from app.infrastructure.storage.file_storage import LocalFileStorage
from app.infrastructure.repositories.question_repo_impl import (
    create_question,
    get_questions,
    get_featured_questions,
    get_question_by_id,
    update_question,
    delete_question,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/questions", tags=["Questions"])


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
def add_question(question: QuestionCreate, db: Session = Depends(get_db)):
    return create_question(db, question)


@router.get("", response_model=List[QuestionOut])
def list_questions(marks_id: Optional[str] = Query(default=None), db: Session = Depends(get_db)):
    return get_questions(db, marks_id)


@router.get("/featured", response_model=List[FeaturedQuestionOut])
def featured_questions(subject_id: str = Query(...), db: Session = Depends(get_db)):
    """Highest scoring questions of a subject, for revision."""
    return get_featured_questions(db, subject_id)


@router.get("/{question_id}", response_model=QuestionDetailOut)
def get_question(question_id: str, db: Session = Depends(get_db)):
    return get_question_by_id(db, question_id)


@router.put("/{question_id}", response_model=QuestionOut)
def modify_question(question_id: str, question: QuestionUpdate, db: Session = Depends(get_db)):
    return update_question(db, question_id, question)


@router.delete("/{question_id}")
def remove_question(
    question_id: str,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return delete_question(db, question_id, storage)
