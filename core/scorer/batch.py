#!/usr/bin/env python3
"""
Batch Scoring Orchestrator - Score many candidates against one job.

Job data is fetched once per call. Candidates are processed in fixed-size
batches; within a batch every candidate is fetched and scored concurrently.
Each result goes through the ScoreCache, keyed by (candidate, job, weights)
and validated by a hash of (candidate, job, job skills).
"""

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple
import asyncio
import logging

from core.cache import ScoreCache, content_hash, make_score_key
from core.exceptions import NotFoundError
from core.models import Job, JobSkill, ScoreBreakdown, ScoreWeights
from core.utils import chunked
from core.scorer.service import ScoringEngine

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


def score_content_hash(candidate_id: Any, job_id: Any, job_skills: Sequence[JobSkill]) -> str:
    return content_hash({
        'candidateId': candidate_id,
        'jobId': job_id,
        'jobSkills': [asdict(s) for s in job_skills],
    })


class BatchScoringOrchestrator:
    """
    Cached, batched front end to the ScoringEngine.

    The cache is owned by (or injected into) this orchestrator; nothing here
    is process-global.
    """

    def __init__(
        self,
        engine: ScoringEngine,
        cache: Optional[ScoreCache] = None,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        self.engine = engine
        self.cache = cache if cache is not None else ScoreCache()
        self.batch_size = max(1, batch_size)

    @property
    def store(self):
        return self.engine.store

    def _weights(self, weights: Optional[ScoreWeights]) -> ScoreWeights:
        return weights or self.engine.config.default_weights

    async def _score_one(
        self,
        candidate_id: Any,
        job: Job,
        job_skills: List[JobSkill],
        weights: ScoreWeights
    ) -> Tuple[Any, Optional[ScoreBreakdown]]:
        cache_key = make_score_key(candidate_id, job.id, weights)
        data_hash = score_content_hash(candidate_id, job.id, job_skills)

        cached = self.cache.get(cache_key, data_hash)
        if cached is not None:
            return candidate_id, cached

        try:
            candidate, candidate_skills = await self.engine.fetch_candidate(candidate_id)
        except NotFoundError:
            logger.debug(f"Candidate {candidate_id} no longer available, skipping")
            return candidate_id, None

        breakdown = await self.engine.compute_breakdown(
            candidate, candidate_skills, job, job_skills, weights
        )
        self.cache.set(cache_key, breakdown, data_hash)
        return candidate_id, breakdown

    async def batch_score(
        self,
        candidate_ids: Sequence[Any],
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> Dict[Any, ScoreBreakdown]:
        """
        Score every resolvable candidate in ``candidate_ids`` against a job.

        Unresolvable candidates are omitted from the result.

        Raises:
            JobNotFoundError: if the job cannot be resolved
        """
        weights = self._weights(weights)
        job, job_skills = await self.engine.fetch_job(job_id)

        results: Dict[Any, ScoreBreakdown] = {}
        unique_ids = list(dict.fromkeys(candidate_ids))

        for batch in chunked(unique_ids, self.batch_size):
            batch_results = await asyncio.gather(*[
                self._score_one(candidate_id, job, job_skills, weights)
                for candidate_id in batch
            ])
            for candidate_id, breakdown in batch_results:
                if breakdown is not None:
                    results[candidate_id] = breakdown

        logger.info(f"Batch scored {len(results)}/{len(unique_ids)} candidates for job {job_id}")
        return results

    async def score_incremental(
        self,
        candidate_id: Any,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        """
        Cached single-candidate scoring, e.g. right after a candidate is added.

        Raises:
            JobNotFoundError, CandidateNotFoundError
        """
        weights = self._weights(weights)
        job, job_skills = await self.engine.fetch_job(job_id)

        cache_key = make_score_key(candidate_id, job.id, weights)
        data_hash = score_content_hash(candidate_id, job.id, job_skills)
        cached = self.cache.get(cache_key, data_hash)
        if cached is not None:
            return cached

        candidate, candidate_skills = await self.engine.fetch_candidate(candidate_id)
        breakdown = await self.engine.compute_breakdown(
            candidate, candidate_skills, job, job_skills, weights
        )
        self.cache.set(cache_key, breakdown, data_hash)
        return breakdown

    async def warm_up_cache(
        self,
        job_id: Any,
        candidate_ids: Sequence[Any],
        weights: Optional[ScoreWeights] = None
    ) -> int:
        """Pre-compute scores for a job. Returns how many candidates were scored."""
        logger.info(f"Warming up score cache for job {job_id} with {len(candidate_ids)} candidates")
        results = await self.batch_score(candidate_ids, job_id, weights)
        return len(results)

    def clear_cache(self, job_id: Optional[Any] = None) -> int:
        return self.cache.clear(job_id)

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_cache_stats()
