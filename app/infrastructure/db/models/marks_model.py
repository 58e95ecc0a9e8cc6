from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

class Marks(Base):
    """A marks category (2/5/10 ...) of a system. Value is unique per system."""

    __tablename__ = "marks"

    id = Column(String, primary_key=True, default=new_id)
    value = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    system_id = Column(String, ForeignKey("systems.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    system = relationship("System", back_populates="marks")
    questions = relationship(
        "Question",
        back_populates="marks",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)
