from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Boolean, Index
from sqlalchemy.orm import relationship

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobOpening(Base):
    __tablename__ = 'jobs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    skills = relationship(
        "JobSkillRequirement",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobSkillRequirement.id",
    )
    scores = relationship("CandidateScore", back_populates="job", cascade="all, delete-orphan")


class JobSkillRequirement(Base):
    """One skill a job asks for; ``required`` splits must-have from nice-to-have."""
    __tablename__ = 'job_skills'

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    skill = Column(Text, nullable=False)
    required = Column(Boolean, nullable=False, default=False)

    job = relationship("JobOpening", back_populates="skills")

    __table_args__ = (
        Index('idx_job_skills_job', 'job_id'),
    )
