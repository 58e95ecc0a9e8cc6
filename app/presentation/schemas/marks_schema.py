from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class MarksCreate(BaseModel):
    value: int
    description: Optional[str] = None
    system_id: str

class MarksUpdate(BaseModel):
    value: Optional[int] = None
    description: Optional[str] = None

class MarksOut(BaseModel):
    id: str
    value: int
    description: Optional[str] = None
    system_id: str
    question_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class MarksBrief(BaseModel):
    id: str
    value: int
    system_id: str

    class Config:
        from_attributes = True
