from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

# ------------------ Subject Schemas ------------------

class SubjectCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Subject name is required")
        return value.strip()

class SubjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Subject name cannot be empty")
        return value.strip() if value is not None else value

class SubjectOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    system_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
