from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from ..base import Base, new_id, utcnow

class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships with cascade delete
    systems = relationship(
        "System",
        back_populates="subject",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def system_count(self) -> int:
        return len(self.systems)
