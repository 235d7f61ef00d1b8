from sqlalchemy import Column, String, DateTime, Integer, Boolean, JSON, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from quizbuilder.database import Base

class Alternative(Base):
    __tablename__ = "alternatives"

    id = Column(String, primary_key=True)
    exercise_id = Column(String, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    content = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    explanation = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    image_urls = Column(JSON, nullable=True)  # up to 4
    order = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('exercise_id', 'order', name='unique_alternative_order'),
        # At most one correct alternative per exercise
        Index(
            'unique_correct_alternative',
            'exercise_id',
            unique=True,
            postgresql_where=text('is_correct'),
            sqlite_where=text('is_correct = 1'),
        ),
    )

    exercise = relationship("Exercise", back_populates="alternatives")

    def __repr__(self):
        return f"<Alternative(id={self.id}, exercise_id={self.exercise_id}, is_correct={self.is_correct})>"
