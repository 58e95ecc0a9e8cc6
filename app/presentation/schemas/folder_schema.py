from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime

from .file_schema import FileOut

class FolderCreate(BaseModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    question_id: str

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Folder name is required")
        return value.strip()

class FolderUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Folder name cannot be empty")
        return value.strip() if value is not None else value

class FolderOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: str
    icon: str
    question_id: str
    file_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class FolderDetailOut(FolderOut):
    files: List[FileOut] = []
