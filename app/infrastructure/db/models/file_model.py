from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

class File(Base):
    __tablename__ = "files"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)  # generated storage name
    original_name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String, nullable=False)
    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    # NULL folder means the file sits at the root of the question
    folder_id = Column(String, ForeignKey("folders.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    question = relationship("Question", back_populates="files")
    folder = relationship("Folder", back_populates="files")
