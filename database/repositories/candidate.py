import logging
from datetime import datetime
from typing import List, Optional, Any, Iterable, Dict

from sqlalchemy import select

from database.models import CandidateProfile, CandidateSkill
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CandidateRepository(BaseRepository):
    def get_by_id(self, candidate_id: Any) -> Optional[CandidateProfile]:
        stmt = select(CandidateProfile).where(CandidateProfile.id == candidate_id)
        return self._one_or_none(stmt)

    def get_skills(self, candidate_id: Any) -> List[str]:
        stmt = (
            select(CandidateSkill.skill)
            .where(CandidateSkill.candidate_id == candidate_id)
            .order_by(CandidateSkill.id)
        )
        return self._all(stmt)

    def list_all(self) -> List[CandidateProfile]:
        stmt = select(CandidateProfile).order_by(CandidateProfile.id)
        return self._all(stmt)

    def create(
        self,
        name: str,
        years_experience: Optional[float] = None,
        last_role_title: Optional[str] = None,
        skills: Iterable[str] = (),
        experience_gaps: Optional[List[Dict[str, Any]]] = None,
        created_at: Optional[datetime] = None,
        last_active_at: Optional[datetime] = None
    ) -> CandidateProfile:
        candidate = CandidateProfile(
            name=name,
            years_experience=years_experience,
            last_role_title=last_role_title,
            experience_gaps=list(experience_gaps or []),
            last_active_at=last_active_at,
        )
        if created_at is not None:
            candidate.created_at = created_at
        for skill in skills:
            candidate.skills.append(CandidateSkill(skill=skill))
        self.db.add(candidate)
        self.db.flush()  # Generate ID
        logger.debug(f"Created candidate {candidate.id}: {name}")
        return candidate
