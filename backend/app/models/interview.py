from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    interview_type = Column(String(20), nullable=False)  # phone | video | in_person | technical
    scheduled_at = Column(DateTime(timezone=True), nullable=False)  # stored in UTC
    duration_minutes = Column(Integer, nullable=False, default=30)
    interviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Lifecycle: scheduled -> completed (or cancelled / rescheduled)
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)  # freeform feedback after completion

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    application = relationship("Application", back_populates="interviews")
    interviewer = relationship("User")
