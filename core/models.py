#!/usr/bin/env python3
"""
Domain Models - Data structures shared by scoring, caching and ranking.

These are plain dataclasses decoupled from the persistence layer; the store
converts its rows into these before handing them to the core.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class ScoreWeights:
    """Per-run factor weights. Conventionally sum to 1.0 (not enforced)."""
    skills: float = 0.5
    title: float = 0.2
    seniority: float = 0.15
    recency: float = 0.1
    gaps: float = 0.05

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ScoreWeights":
        if not data:
            return cls()
        return cls(**{k: float(v) for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class JobSkill:
    skill: str
    required: bool = False


@dataclass
class Job:
    id: int
    title: str
    description: str = ""
    must: List[str] = field(default_factory=list)
    nice: List[str] = field(default_factory=list)


@dataclass
class EmploymentGap:
    start: Optional[str] = None
    end: Optional[str] = None
    months: Optional[float] = None


@dataclass
class Candidate:
    id: int
    name: str
    years_experience: Optional[float] = None
    last_role_title: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience_gaps: List[EmploymentGap] = field(default_factory=list)
    created_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None


@dataclass
class ScoreBreakdown:
    """Deterministic score for one candidate/job pair plus optional AI rank fields."""
    candidate_id: int
    job_id: int
    total_score: float = 0.0
    skill_match_score: float = 0.0
    title_score: float = 0.0
    seniority_score: float = 0.0
    recency_score: float = 0.0
    gap_penalty: float = 0.0
    missing_must_have: List[str] = field(default_factory=list)
    explanation: str = ""
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    ai_rank: Optional[int] = None
    ai_rank_reason: Optional[str] = None


@dataclass
class RankedCandidate:
    candidate_id: int
    rank: int
    reason: str
