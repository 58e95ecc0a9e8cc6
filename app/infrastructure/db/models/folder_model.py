from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

class Folder(Base):
    __tablename__ = "folders"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=False, default="blue")
    icon = Column(String, nullable=False, default="folder")
    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    question = relationship("Question", back_populates="folders")
    files = relationship("File", back_populates="folder", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def file_count(self) -> int:
        return len(self.files)
