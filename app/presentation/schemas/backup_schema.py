from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from app.infrastructure.storage.file_storage import is_plain_name

# ------------------ Snapshot records ------------------
# Snapshot files use camelCase keys; snake_case is accepted on import too.


class SnapshotRecord(BaseModel):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class SubjectRecord(SnapshotRecord):
    name: str
    description: Optional[str] = None


class SystemRecord(SnapshotRecord):
    name: str
    description: Optional[str] = None
    subject_id: str


class MarksRecord(SnapshotRecord):
    value: int
    description: Optional[str] = None
    system_id: str


class QuestionRecord(SnapshotRecord):
    title: str
    content: Optional[str] = None
    terminologies: Optional[str] = None
    repeat_count: int = 1
    years_appeared: str = ""
    last_appeared_year: Optional[int] = None
    global_importance: float = 50
    calculated_score: float = 0
    marks_id: str


class FolderRecord(SnapshotRecord):
    name: str
    description: Optional[str] = None
    color: str = "blue"
    icon: str = "folder"
    question_id: str


class FileRecord(SnapshotRecord):
    name: str
    original_name: str
    mime_type: str
    size: int
    path: str
    question_id: str
    folder_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_is_plain(cls, value: str) -> str:
        if not is_plain_name(value):
            raise ValueError("File name must not contain a path")
        return value


# Exported records carry their direct relations one level deep

class SubjectExport(SubjectRecord):
    systems: List[SystemRecord] = []


class SystemExport(SystemRecord):
    subject: Optional[SubjectRecord] = None
    marks: List[MarksRecord] = []


class MarksExport(MarksRecord):
    system: Optional[SystemRecord] = None
    questions: List[QuestionRecord] = []


class QuestionExport(QuestionRecord):
    marks: Optional[MarksRecord] = None
    files: List[FileRecord] = []
    folders: List[FolderRecord] = []


class FolderExport(FolderRecord):
    question: Optional[QuestionRecord] = None
    files: List[FileRecord] = []


class FileExport(FileRecord):
    question: Optional[QuestionRecord] = None
    folder: Optional[FolderRecord] = None


class SnapshotData(BaseModel):
    subjects: Optional[List[SubjectRecord]] = None
    systems: Optional[List[SystemRecord]] = None
    marks: Optional[List[MarksRecord]] = None
    questions: Optional[List[QuestionRecord]] = None
    folders: Optional[List[FolderRecord]] = None
    files: Optional[List[FileRecord]] = None


# ------------------ Requests ------------------

class ImportRequest(BaseModel):
    data: Optional[Dict[str, Any]] = None
    mode: Literal["merge", "replace"] = "merge"


class ImportResponse(BaseModel):
    success: bool
    message: str
    stats: Dict[str, int]


class AutoBackupConfigUpdate(BaseModel):
    auto_backup_enabled: Optional[bool] = None
    backup_interval: Optional[int] = Field(default=None, description="Minutes between backups")
    max_backups: Optional[int] = None
    retention_days: Optional[int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
