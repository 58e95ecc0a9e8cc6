from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class FileMove(BaseModel):
    folder_id: Optional[str] = None  # None moves the file back to the question root

class FileOut(BaseModel):
    id: str
    name: str
    original_name: str
    mime_type: str
    size: int
    path: str
    question_id: str
    folder_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
