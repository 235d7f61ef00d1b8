from sqlalchemy import Column, String, DateTime, Integer, Float, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from quizbuilder.database import Base

class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(String, primary_key=True)
    module_id = Column(String, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    image_urls = Column(JSON, nullable=True)
    video_url = Column(String, nullable=True)
    image_display_size = Column(String, nullable=False, default="medium")
    image_layout = Column(String, nullable=False, default="grid")  # grid, carousel, vertical, horizontal
    weight = Column(Float, nullable=False, default=1)  # scoring multiplier
    order = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('module_id', 'order', name='unique_exercise_order'),
    )

    module = relationship("Module", back_populates="exercises")
    alternatives = relationship("Alternative", back_populates="exercise", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Exercise(id={self.id}, module_id={self.module_id}, question={self.question[:20]})>"
