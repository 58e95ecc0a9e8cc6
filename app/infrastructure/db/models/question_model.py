from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

# ---------------------------
# Questions
# ---------------------------
class Question(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    terminologies = Column(Text, nullable=True)
    repeat_count = Column(Integer, nullable=False, default=1)
    years_appeared = Column(String, nullable=False, default="")  # e.g. "2019,2021,2023"
    last_appeared_year = Column(Integer, nullable=True)
    global_importance = Column(Float, nullable=False, default=50)
    calculated_score = Column(Float, nullable=False, default=0, index=True)
    marks_id = Column(String, ForeignKey("marks.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    marks = relationship("Marks", back_populates="questions")
    folders = relationship("Folder", back_populates="question", cascade="all, delete-orphan", passive_deletes=True)
    files = relationship("File", back_populates="question", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def system_name(self):
        return self.marks.system.name if self.marks and self.marks.system else None

    @property
    def subject_id(self):
        return self.marks.system.subject_id if self.marks and self.marks.system else None
