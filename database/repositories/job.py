import logging
from typing import List, Optional, Any, Iterable, Tuple

from sqlalchemy import select

from database.models import JobOpening, JobSkillRequirement
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobRepository(BaseRepository):
    def get_by_id(self, job_id: Any) -> Optional[JobOpening]:
        stmt = select(JobOpening).where(JobOpening.id == job_id)
        return self._one_or_none(stmt)

    def get_skills(self, job_id: Any) -> List[JobSkillRequirement]:
        stmt = (
            select(JobSkillRequirement)
            .where(JobSkillRequirement.job_id == job_id)
            .order_by(JobSkillRequirement.id)
        )
        return self._all(stmt)

    def create(
        self,
        title: str,
        description: str = "",
        skills: Iterable[Tuple[str, bool]] = ()
    ) -> JobOpening:
        job = JobOpening(title=title, description=description)
        for skill, required in skills:
            job.skills.append(JobSkillRequirement(skill=skill, required=required))
        self.db.add(job)
        self.db.flush()  # Generate ID
        logger.debug(f"Created job {job.id}: {title}")
        return job
