from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

class System(Base):
    __tablename__ = "systems"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    subject_id = Column(String, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    subject = relationship("Subject", back_populates="systems")
    marks = relationship(
        "Marks",
        back_populates="system",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def marks_count(self) -> int:
        return len(self.marks)
