from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Float, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from .base import Base
from .job import _utcnow


class CandidateScore(Base):
    """
    Score record for one candidate/job pair.

    Deterministic fields are replaced on every rescore. ``ai_rank`` and
    ``ai_rank_reason`` are written separately by the ranking reconciler and
    survive rescoring.
    """
    __tablename__ = 'scores'

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Integer, ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(Integer, ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)

    total_score = Column(Float, nullable=False, default=0)
    skill_match_score = Column(Float, nullable=False, default=0)
    title_score = Column(Float, nullable=False, default=0)
    seniority_score = Column(Float, nullable=False, default=0)
    recency_score = Column(Float, nullable=False, default=0)
    gap_penalty = Column(Float, nullable=False, default=0)
    missing_must_have = Column(JSON, nullable=False, default=list)
    explanation = Column(Text, nullable=False, default='')
    weights = Column(JSON, nullable=False, default=dict)

    ai_rank = Column(Integer, nullable=True)
    ai_rank_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    candidate = relationship("CandidateProfile", back_populates="scores")
    job = relationship("JobOpening", back_populates="scores")

    __table_args__ = (
        UniqueConstraint('candidate_id', 'job_id', name='uq_scores_candidate_job'),
        Index('idx_scores_job_total', 'job_id', 'total_score'),
    )
