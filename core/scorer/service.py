#!/usr/bin/env python3
"""
Scoring Engine - Deterministic multi-factor score for one candidate/job pair.

Combines five factors into a 0-100 total:
- Skill match: required/preferred coverage with synonym-aware matching
- Title match: exact, semantic (fallible collaborator) or keyword heuristic
- Seniority: stepped by years of experience
- Recency: stepped by months since last activity
- Employment gaps: stepped deduction, contributes as (100 - penalty)

The explanation is generated from the breakdown alone, so it is reproducible
without calling any collaborator.
"""

from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence, Tuple
import asyncio
import logging

from core.config_loader import ScoringConfig
from core.exceptions import CandidateNotFoundError, JobNotFoundError
from core.llm.interfaces import SimilarityProvider
from core.models import Candidate, Job, JobSkill, ScoreBreakdown, ScoreWeights
from core.skills import SkillNormalizer
from core.utils import clamp, round_half_up
from database.interfaces import ScoringStore

from core.scorer import coverage
from core.scorer import factors
from core.scorer.explanation import generate_explanation
from core.scorer.title_match import calculate_title_score

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def combine_scores(
    skill_match: float,
    title: float,
    seniority: float,
    recency: float,
    gap_penalty: float,
    weights: ScoreWeights
) -> int:
    """Weighted total, rounded half-up and clamped to [0, 100]."""
    raw = (
        skill_match * weights.skills
        + title * weights.title
        + seniority * weights.seniority
        + recency * weights.recency
        + (100 - gap_penalty) * weights.gaps
    )
    return int(clamp(round_half_up(raw), 0, 100))


class ScoringEngine:
    """
    Produces ScoreBreakdowns. Holds no per-call state, so one engine can
    serve concurrent scoring tasks.
    """

    def __init__(
        self,
        store: ScoringStore,
        config: Optional[ScoringConfig] = None,
        normalizer: Optional[SkillNormalizer] = None,
        similarity_provider: Optional[SimilarityProvider] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.config = config or ScoringConfig()
        self.normalizer = normalizer or SkillNormalizer(self.config.skill_synonyms)
        self.similarity_provider = similarity_provider if self.config.use_title_similarity else None
        self.clock = clock or _utcnow

    async def fetch_job(self, job_id: Any) -> Tuple[Job, List[JobSkill]]:
        """Job plus its skills; raises JobNotFoundError."""
        job, job_skills = await asyncio.gather(
            self.store.get_job(job_id),
            self.store.get_job_skills(job_id),
        )
        if job is None:
            raise JobNotFoundError(job_id)
        return job, job_skills

    async def fetch_candidate(self, candidate_id: Any) -> Tuple[Candidate, List[str]]:
        """Candidate plus its skills; raises CandidateNotFoundError."""
        candidate, candidate_skills = await asyncio.gather(
            self.store.get_candidate(candidate_id),
            self.store.get_candidate_skills(candidate_id),
        )
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        return candidate, candidate_skills

    async def score_candidate(
        self,
        candidate_id: Any,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        """
        Score one candidate against one job.

        Raises:
            JobNotFoundError, CandidateNotFoundError: if the store cannot resolve either side
        """
        job, job_skills = await self.fetch_job(job_id)
        candidate, candidate_skills = await self.fetch_candidate(candidate_id)
        return await self.compute_breakdown(candidate, candidate_skills, job, job_skills, weights)

    async def compute_breakdown(
        self,
        candidate: Candidate,
        candidate_skills: Sequence[str],
        job: Job,
        job_skills: Sequence[JobSkill],
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        """Score already-fetched data. Only the title similarity call can suspend."""
        weights = weights or self.config.default_weights

        skill_result = coverage.calculate_skill_match(candidate_skills, job_skills, self.normalizer)
        title_score = await calculate_title_score(
            candidate.last_role_title,
            job.title,
            self.config.title_seniority_levels,
            self.similarity_provider,
        )
        seniority_score = factors.calculate_seniority_score(candidate.years_experience, self.config)
        recency_score = factors.calculate_recency_score(
            factors.last_activity(candidate), self.clock(), self.config
        )
        gap_penalty = factors.calculate_gap_penalty(candidate.experience_gaps, self.config)

        total_score = combine_scores(
            skill_result.score, title_score, seniority_score, recency_score, gap_penalty, weights
        )

        explanation = generate_explanation(
            candidate_name=candidate.name,
            job_title=job.title,
            years_experience=candidate.years_experience,
            skill_match_score=skill_result.score,
            title_score=title_score,
            gap_penalty=gap_penalty,
            missing_must_have=skill_result.missing_must_have,
        )

        logger.debug(
            f"Candidate {candidate.id} / job {job.id}: skills={skill_result.score}, "
            f"title={title_score}, seniority={seniority_score}, recency={recency_score}, "
            f"gaps=-{gap_penalty}, total={total_score}"
        )

        return ScoreBreakdown(
            candidate_id=candidate.id,
            job_id=job.id,
            total_score=total_score,
            skill_match_score=skill_result.score,
            title_score=title_score,
            seniority_score=seniority_score,
            recency_score=recency_score,
            gap_penalty=gap_penalty,
            missing_must_have=list(skill_result.missing_must_have),
            explanation=explanation,
            weights=weights,
        )

