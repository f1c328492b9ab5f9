#!/usr/bin/env python3
"""
Candidate Ranking Service - The operations the core exposes upward.

Thin facade over the scoring engine, batch orchestrator and AI ranking
reconciler. The score cache is shared by the orchestrator and reconciler,
so clearing a job here clears both its scores and its rankings.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from core.exceptions import PersistenceError
from core.models import RankedCandidate, ScoreBreakdown, ScoreWeights
from core.ranking import AIRankingReconciler
from core.scorer import BatchScoringOrchestrator, ScoringEngine

logger = logging.getLogger(__name__)


class CandidateRankingService:
    def __init__(
        self,
        engine: ScoringEngine,
        orchestrator: BatchScoringOrchestrator,
        reconciler: AIRankingReconciler
    ):
        self.engine = engine
        self.orchestrator = orchestrator
        self.reconciler = reconciler

    @property
    def store(self):
        return self.engine.store

    async def score_candidate(
        self,
        candidate_id: Any,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        return await self.engine.score_candidate(candidate_id, job_id, weights)

    async def score_incremental(
        self,
        candidate_id: Any,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        return await self.orchestrator.score_incremental(candidate_id, job_id, weights)

    async def batch_score(
        self,
        candidate_ids: Sequence[Any],
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> Dict[Any, ScoreBreakdown]:
        return await self.orchestrator.batch_score(candidate_ids, job_id, weights)

    async def warm_up_cache(
        self,
        job_id: Any,
        candidate_ids: Sequence[Any],
        weights: Optional[ScoreWeights] = None
    ) -> int:
        return await self.orchestrator.warm_up_cache(job_id, candidate_ids, weights)

    async def _save(self, breakdown: ScoreBreakdown) -> ScoreBreakdown:
        try:
            return await self.store.save_score(breakdown)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(
                f"Failed to save score for candidate {breakdown.candidate_id} "
                f"and job {breakdown.job_id}: {e}"
            ) from e

    async def score_and_save(
        self,
        candidate_id: Any,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> ScoreBreakdown:
        """Score one pair and persist it. AI rank fields on an existing record are kept."""
        breakdown = await self.engine.score_candidate(candidate_id, job_id, weights)
        return await self._save(breakdown)

    async def rescore_job(
        self,
        job_id: Any,
        weights: Optional[ScoreWeights] = None
    ) -> Dict[Any, ScoreBreakdown]:
        """
        Score and persist every candidate of a job, e.g. after weights change.

        Records written before a failure stay written.
        """
        candidates = await self.store.list_candidates_for_job(job_id)
        results = await self.orchestrator.batch_score([c.id for c in candidates], job_id, weights)

        saved: Dict[Any, ScoreBreakdown] = {}
        for candidate_id, breakdown in results.items():
            saved[candidate_id] = await self._save(breakdown)

        logger.info(f"Rescored and saved {len(saved)} candidates for job {job_id}")
        return saved

    async def rank_candidates_for_job(
        self,
        job_id: Any,
        use_cache: bool = True
    ) -> List[RankedCandidate]:
        return await self.reconciler.rank_candidates_for_job(job_id, use_cache=use_cache)

    def clear_cache(self, job_id: Optional[Any] = None) -> int:
        removed = self.orchestrator.clear_cache(job_id)
        if self.reconciler.cache is not self.orchestrator.cache:
            removed += self.reconciler.clear_cache(job_id)
        return removed

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.orchestrator.get_cache_stats()
