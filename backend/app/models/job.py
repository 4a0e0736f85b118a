from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(150), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    location = Column(String(100), nullable=False)
    remote_allowed = Column(Boolean, nullable=False, default=False)
    employment_type = Column(String(20), nullable=False, default="full_time")
    experience_level = Column(String(20), nullable=False, default="mid")
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default="draft", index=True)
    posted_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    deadline = Column(DateTime(timezone=True), nullable=True)  # Application deadline
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="jobs")
    poster = relationship("User", back_populates="jobs")
    # Deleting a job also removes its applications at ORM level.
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
