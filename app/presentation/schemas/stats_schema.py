from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class CatalogCounts(BaseModel):
    subjects: int
    systems: int
    marks: int
    questions: int
    files: int
    folders: int
    storage: int


class ImportanceSummary(BaseModel):
    avg_score: float
    high_importance_count: int
    critical_count: int
    repeated_questions: int
    total_repeats: int


class RecentSubject(BaseModel):
    id: str
    name: str
    created_at: datetime


class QuestionHighlight(BaseModel):
    id: str
    title: str
    repeat_count: int
    calculated_score: float
    global_importance: float
    years_appeared: str
    created_at: datetime
    marks_value: Optional[int] = None
    system_name: Optional[str] = None
    subject_name: Optional[str] = None


class RecentActivity(BaseModel):
    subjects: List[RecentSubject]
    questions: List[QuestionHighlight]


class StatsResponse(BaseModel):
    counts: CatalogCounts
    importance: ImportanceSummary
    recent_activity: RecentActivity
    featured_questions: List[QuestionHighlight]
