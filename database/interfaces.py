"""
Store Interface - The narrow repository surface the scoring core depends on.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from core.models import Candidate, Job, JobSkill, ScoreBreakdown


class ScoringStore(ABC):
    """
    Abstract async store for jobs, candidates and score records.

    Implementations raise ``PersistenceError`` when the backend fails; a
    missing row is reported as ``None`` (or an empty list), not an error.
    """

    @abstractmethod
    async def get_job(self, job_id: Any) -> Optional[Job]:
        pass

    @abstractmethod
    async def get_job_skills(self, job_id: Any) -> List[JobSkill]:
        pass

    @abstractmethod
    async def get_candidate(self, candidate_id: Any) -> Optional[Candidate]:
        pass

    @abstractmethod
    async def get_candidate_skills(self, candidate_id: Any) -> List[str]:
        pass

    @abstractmethod
    async def list_candidates_for_job(self, job_id: Any) -> List[Candidate]:
        """The candidate pool a job is scored and ranked over."""
        pass

    @abstractmethod
    async def get_score(self, candidate_id: Any, job_id: Any) -> Optional[ScoreBreakdown]:
        pass

    @abstractmethod
    async def save_score(self, breakdown: ScoreBreakdown) -> ScoreBreakdown:
        """Upsert the deterministic fields of a score record. AI rank fields are preserved."""
        pass

    @abstractmethod
    async def update_ai_ranking(self, candidate_id: Any, job_id: Any, rank: int, reason: str) -> None:
        """Set ``ai_rank``/``ai_rank_reason`` on an existing score record."""
        pass
