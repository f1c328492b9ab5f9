"""
SQLAlchemy Store - ScoringStore backed by a relational database.

Repositories are synchronous; every store call runs one unit of work on a
worker thread so the event loop never blocks on the database.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.exceptions import PersistenceError
from core.models import Candidate, EmploymentGap, Job, JobSkill, ScoreBreakdown, ScoreWeights
from database.interfaces import ScoringStore
from database.models import CandidateProfile, CandidateScore, JobOpening
from database.uow import scoring_uow, ScoringUnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_job(row: JobOpening) -> Job:
    return Job(
        id=row.id,
        title=row.title,
        description=row.description or "",
        must=[s.skill for s in row.skills if s.required],
        nice=[s.skill for s in row.skills if not s.required],
    )


def _to_candidate(row: CandidateProfile) -> Candidate:
    gaps = [
        EmploymentGap(start=g.get('start'), end=g.get('end'), months=g.get('months'))
        for g in (row.experience_gaps or [])
        if isinstance(g, dict)
    ]
    return Candidate(
        id=row.id,
        name=row.name,
        years_experience=row.years_experience,
        last_role_title=row.last_role_title,
        skills=[s.skill for s in row.skills],
        experience_gaps=gaps,
        created_at=row.created_at,
        last_active_at=row.last_active_at,
    )


def _to_breakdown(row: CandidateScore) -> ScoreBreakdown:
    return ScoreBreakdown(
        candidate_id=row.candidate_id,
        job_id=row.job_id,
        total_score=row.total_score,
        skill_match_score=row.skill_match_score,
        title_score=row.title_score,
        seniority_score=row.seniority_score,
        recency_score=row.recency_score,
        gap_penalty=row.gap_penalty,
        missing_must_have=list(row.missing_must_have or []),
        explanation=row.explanation or "",
        weights=ScoreWeights.from_dict(row.weights),
        ai_rank=row.ai_rank,
        ai_rank_reason=row.ai_rank_reason,
    )


def _score_values(breakdown: ScoreBreakdown) -> Dict[str, Any]:
    return {
        'total_score': breakdown.total_score,
        'skill_match_score': breakdown.skill_match_score,
        'title_score': breakdown.title_score,
        'seniority_score': breakdown.seniority_score,
        'recency_score': breakdown.recency_score,
        'gap_penalty': breakdown.gap_penalty,
        'missing_must_have': list(breakdown.missing_must_have),
        'explanation': breakdown.explanation,
        'weights': breakdown.weights.to_dict(),
    }


class SqlAlchemyStore(ScoringStore):
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run_sync(self, operation: str, work: Callable[[ScoringUnitOfWork], T]) -> T:
        try:
            with scoring_uow(self.session_factory) as uow:
                return work(uow)
        except SQLAlchemyError as e:
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise PersistenceError(f"Store operation '{operation}' failed: {e}") from e

    async def _run(self, operation: str, work: Callable[[ScoringUnitOfWork], T]) -> T:
        return await asyncio.to_thread(self._run_sync, operation, work)

    async def get_job(self, job_id: Any) -> Optional[Job]:
        def work(uow: ScoringUnitOfWork) -> Optional[Job]:
            row = uow.jobs.get_by_id(job_id)
            return _to_job(row) if row else None
        return await self._run('get_job', work)

    async def get_job_skills(self, job_id: Any) -> List[JobSkill]:
        def work(uow: ScoringUnitOfWork) -> List[JobSkill]:
            return [JobSkill(skill=s.skill, required=bool(s.required)) for s in uow.jobs.get_skills(job_id)]
        return await self._run('get_job_skills', work)

    async def get_candidate(self, candidate_id: Any) -> Optional[Candidate]:
        def work(uow: ScoringUnitOfWork) -> Optional[Candidate]:
            row = uow.candidates.get_by_id(candidate_id)
            return _to_candidate(row) if row else None
        return await self._run('get_candidate', work)

    async def get_candidate_skills(self, candidate_id: Any) -> List[str]:
        return await self._run('get_candidate_skills', lambda uow: uow.candidates.get_skills(candidate_id))

    async def list_candidates_for_job(self, job_id: Any) -> List[Candidate]:
        def work(uow: ScoringUnitOfWork) -> List[Candidate]:
            return [_to_candidate(row) for row in uow.candidates.list_all()]
        return await self._run('list_candidates_for_job', work)

    async def get_score(self, candidate_id: Any, job_id: Any) -> Optional[ScoreBreakdown]:
        def work(uow: ScoringUnitOfWork) -> Optional[ScoreBreakdown]:
            row = uow.scores.get(candidate_id, job_id)
            return _to_breakdown(row) if row else None
        return await self._run('get_score', work)

    async def save_score(self, breakdown: ScoreBreakdown) -> ScoreBreakdown:
        def work(uow: ScoringUnitOfWork) -> ScoreBreakdown:
            row = uow.scores.upsert(breakdown.candidate_id, breakdown.job_id, _score_values(breakdown))
            return _to_breakdown(row)
        return await self._run('save_score', work)

    async def update_ai_ranking(self, candidate_id: Any, job_id: Any, rank: int, reason: str) -> None:
        def work(uow: ScoringUnitOfWork) -> bool:
            return uow.scores.set_ai_ranking(candidate_id, job_id, rank, reason)

        updated = await self._run('update_ai_ranking', work)
        if not updated:
            raise PersistenceError(
                f"No score record for candidate {candidate_id} and job {job_id}"
            )

    # Seeding helpers

    async def add_job(
        self,
        title: str,
        description: str = "",
        must: Iterable[str] = (),
        nice: Iterable[str] = ()
    ) -> Job:
        skills: List[Tuple[str, bool]] = [(s, True) for s in must] + [(s, False) for s in nice]

        def work(uow: ScoringUnitOfWork) -> Job:
            return _to_job(uow.jobs.create(title=title, description=description, skills=skills))
        return await self._run('add_job', work)

    async def add_candidate(
        self,
        name: str,
        years_experience: Optional[float] = None,
        last_role_title: Optional[str] = None,
        skills: Iterable[str] = (),
        experience_gaps: Optional[List[Dict[str, Any]]] = None,
        created_at: Optional[datetime] = None,
        last_active_at: Optional[datetime] = None
    ) -> Candidate:
        skill_list = list(skills)

        def work(uow: ScoringUnitOfWork) -> Candidate:
            row = uow.candidates.create(
                name=name,
                years_experience=years_experience,
                last_role_title=last_role_title,
                skills=skill_list,
                experience_gaps=experience_gaps,
                created_at=created_at,
                last_active_at=last_active_at,
            )
            return _to_candidate(row)
        return await self._run('add_candidate', work)
