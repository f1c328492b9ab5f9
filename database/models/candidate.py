from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Float, JSON, Index
from sqlalchemy.orm import relationship

from .base import Base
from .job import _utcnow


class CandidateProfile(Base):
    """
    A candidate as extracted at upload time.

    ``experience_gaps`` holds a list of ``{start, end, months}`` objects.
    ``last_role_title`` is only set from parsed data, never from inference.
    """
    __tablename__ = 'candidates'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    years_experience = Column(Float, nullable=True)
    last_role_title = Column(Text, nullable=True)
    experience_gaps = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    last_active_at = Column(DateTime(timezone=True), nullable=True)

    skills = relationship(
        "CandidateSkill",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="CandidateSkill.id",
    )
    scores = relationship("CandidateScore", back_populates="candidate", cascade="all, delete-orphan")


class CandidateSkill(Base):
    __tablename__ = 'candidate_skills'

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Integer, ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False)
    skill = Column(Text, nullable=False)

    candidate = relationship("CandidateProfile", back_populates="skills")

    __table_args__ = (
        Index('idx_candidate_skills_candidate', 'candidate_id'),
    )
