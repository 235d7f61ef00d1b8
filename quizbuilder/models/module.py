from sqlalchemy import Column, String, DateTime, Integer, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from quizbuilder.database import Base

class Module(Base):
    __tablename__ = "modules"

    id = Column(String, primary_key=True)  # UUID
    company_id = Column(String, nullable=False, index=True)  # Tenant
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(String, nullable=False, default="module")  # 'module' or 'exam'
    is_unlocked = Column(Boolean, nullable=False, default=False)  # exam retakes
    order = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Dense order per tenant
    __table_args__ = (
        UniqueConstraint('company_id', 'order', name='unique_module_order'),
    )

    exercises = relationship("Exercise", back_populates="module", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Module(id={self.id}, title={self.title}, type={self.type})>"
