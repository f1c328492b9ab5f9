import logging
from typing import Optional, Any, Dict

from sqlalchemy import select

from database.models import CandidateScore
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

DETERMINISTIC_FIELDS = (
    'total_score',
    'skill_match_score',
    'title_score',
    'seniority_score',
    'recency_score',
    'gap_penalty',
    'missing_must_have',
    'explanation',
    'weights',
)


class ScoreRepository(BaseRepository):
    def get(self, candidate_id: Any, job_id: Any) -> Optional[CandidateScore]:
        stmt = select(CandidateScore).where(
            CandidateScore.candidate_id == candidate_id,
            CandidateScore.job_id == job_id
        )
        return self._one_or_none(stmt)

    def upsert(self, candidate_id: Any, job_id: Any, values: Dict[str, Any]) -> CandidateScore:
        """Insert or replace the deterministic fields; AI rank fields are left alone."""
        record = self.get(candidate_id, job_id)
        if record is None:
            record = CandidateScore(candidate_id=candidate_id, job_id=job_id)
            self.db.add(record)

        for field_name in DETERMINISTIC_FIELDS:
            if field_name in values:
                setattr(record, field_name, values[field_name])

        self.db.flush()
        return record

    def set_ai_ranking(self, candidate_id: Any, job_id: Any, rank: int, reason: str) -> bool:
        """Write AI rank fields only. Returns False if no score record exists."""
        record = self.get(candidate_id, job_id)
        if record is None:
            return False
        record.ai_rank = rank
        record.ai_rank_reason = reason
        self.db.flush()
        return True
