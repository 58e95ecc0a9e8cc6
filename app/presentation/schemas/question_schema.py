from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from .marks_schema import MarksBrief
from .file_schema import FileOut


def _clamp_importance(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    return max(0.0, min(100.0, float(value)))


class QuestionCreate(BaseModel):
    title: str
    content: Optional[str] = None
    terminologies: Optional[str] = None
    marks_id: str
    repeat_count: int = Field(default=1, ge=1)
    years_appeared: str = ""
    global_importance: float = 50

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Question title is required")
        return value.strip()

    @field_validator("global_importance")
    @classmethod
    def clamp_importance(cls, value: float) -> float:
        return _clamp_importance(value)


class QuestionUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    terminologies: Optional[str] = None
    repeat_count: Optional[int] = Field(default=None, ge=1)
    years_appeared: Optional[str] = None
    global_importance: Optional[float] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Question title cannot be empty")
        return value.strip() if value is not None else value

    @field_validator("global_importance")
    @classmethod
    def clamp_importance(cls, value: Optional[float]) -> Optional[float]:
        return _clamp_importance(value)


class QuestionOut(BaseModel):
    id: str
    title: str
    content: Optional[str] = None
    terminologies: Optional[str] = None
    repeat_count: int
    years_appeared: str
    last_appeared_year: Optional[int] = None
    global_importance: float
    calculated_score: float
    marks_id: str
    file_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuestionDetailOut(QuestionOut):
    marks: Optional[MarksBrief] = None
    files: List[FileOut] = []


class FeaturedQuestionOut(QuestionOut):
    marks: Optional[MarksBrief] = None
    system_name: Optional[str] = None
    subject_id: Optional[str] = None
