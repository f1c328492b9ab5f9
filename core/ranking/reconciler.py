#!/usr/bin/env python3
"""
AI Ranking Reconciler - Holistic ranking with a guaranteed 1..N result.

Per request: prepare summaries, dispatch to the ranking collaborator (bounded
by a timeout), parse the payload into a tagged result, repair it into a
complete permutation, and persist ``ai_rank``/``ai_rank_reason``. Any
collaborator failure falls back to ordering by the existing deterministic
score. Store failures are not recovered: they surface as PersistenceError.
"""

from typing import Any, Dict, List, Optional, Sequence
import asyncio
import logging

from core.cache import ScoreCache, content_hash, make_ranking_key
from core.exceptions import JobNotFoundError, MalformedUpstreamResponseError, PersistenceError
from core.llm.interfaces import RankingProvider
from core.models import Candidate, Job, RankedCandidate, ScoreBreakdown, ScoreWeights
from core.scorer.batch import DEFAULT_BATCH_SIZE
from core.skills import SkillNormalizer
from core.utils import chunked
from database.interfaces import ScoringStore

from core.ranking.parsing import (
    MalformedResponse,
    RankingOk,
    RankingResult,
    UpstreamError,
    parse_ranking_payload,
)
from core.ranking.repair import fallback_rankings, repair_rankings
from core.ranking.summaries import (
    build_candidate_summary,
    build_job_summary,
    ranking_input_fingerprint,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_EXPLANATION = "Auto-created for AI ranking"
DEFAULT_RANKING_TIMEOUT_SECONDS = 120.0
RANKING_CACHE_TTL_SECONDS = 60 * 60


class AIRankingReconciler:
    def __init__(
        self,
        store: ScoringStore,
        ranking_provider: Optional[RankingProvider] = None,
        cache: Optional[ScoreCache] = None,
        normalizer: Optional[SkillNormalizer] = None,
        default_weights: Optional[ScoreWeights] = None,
        timeout_seconds: float = DEFAULT_RANKING_TIMEOUT_SECONDS,
        cache_ttl_seconds: float = RANKING_CACHE_TTL_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        self.store = store
        self.ranking_provider = ranking_provider
        self.cache = cache if cache is not None else ScoreCache(ttl_seconds=cache_ttl_seconds)
        self.normalizer = normalizer or SkillNormalizer()
        self.default_weights = default_weights or ScoreWeights()
        self.timeout_seconds = timeout_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self.batch_size = max(1, batch_size)

    async def _load_scores(self, job_id: Any, candidates: Sequence[Candidate]) -> Dict[Any, Optional[ScoreBreakdown]]:
        scores: Dict[Any, Optional[ScoreBreakdown]] = {}
        for batch in chunked(candidates, self.batch_size):
            results = await asyncio.gather(*[self.store.get_score(c.id, job_id) for c in batch])
            scores.update((c.id, score) for c, score in zip(batch, results))
        return scores

    async def dispatch(
        self,
        job: Job,
        candidate_summaries: List[Dict[str, Any]]
    ) -> RankingResult:
        """Call the collaborator and parse its answer. Never raises."""
        if self.ranking_provider is None:
            return UpstreamError(RuntimeError("No ranking collaborator configured"))

        try:
            payload = await asyncio.wait_for(
                self.ranking_provider.rank(build_job_summary(job), candidate_summaries),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Ranking collaborator timed out after {self.timeout_seconds}s")
            return UpstreamError(e)
        except MalformedUpstreamResponseError as e:
            return MalformedResponse(str(e))
        except Exception as e:
            logger.warning(f"Ranking collaborator failed: {e}")
            return UpstreamError(e)

        return parse_ranking_payload(payload)

    async def rank_candidates_for_job(
        self,
        job_id: Any,
        use_cache: bool = True,
        persist: bool = True
    ) -> List[RankedCandidate]:
        """
        Rank every candidate of a job.

        Always returns one entry per candidate with ranks exactly 1..N; an
        AI failure degrades to deterministic order instead of raising.

        Raises:
            JobNotFoundError: if the job does not exist
            PersistenceError: if the store fails
        """
        job = await self.store.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        candidates = await self.store.list_candidates_for_job(job_id)
        if not candidates:
            logger.info(f"No candidates to rank for job {job_id}")
            return []

        scores = await self._load_scores(job_id, candidates)

        def current_score(candidate: Candidate) -> float:
            score = scores.get(candidate.id)
            return score.total_score if score is not None else 0

        # Stable sort: equal scores keep store order
        ordered = sorted(candidates, key=current_score, reverse=True)
        candidate_ids = [c.id for c in ordered]

        cache_key = make_ranking_key(job_id, candidate_ids)
        data_hash = content_hash(ranking_input_fingerprint(job, ordered))

        rankings: Optional[List[RankedCandidate]] = None
        if use_cache:
            rankings = self.cache.get(cache_key, data_hash)
            if rankings is not None:
                logger.info(f"Using cached ranking for job {job_id}")

        if rankings is None:
            summaries = [
                build_candidate_summary(c, job, scores.get(c.id), self.normalizer)
                for c in ordered
            ]
            logger.info(f"Ranking {len(summaries)} candidates for job {job_id}")
            result = await self.dispatch(job, summaries)

            if isinstance(result, RankingOk):
                rankings = repair_rankings(result.entries, candidate_ids)
                if use_cache:
                    self.cache.set(cache_key, rankings, data_hash, ttl_seconds=self.cache_ttl_seconds)
            else:
                if isinstance(result, MalformedResponse):
                    logger.warning(f"Malformed ranking response for job {job_id}: {result.reason}")
                    logger.debug(f"Rejected payload: {str(result.payload)[:500]}")
                logger.info(f"Falling back to algorithmic ranking for job {job_id}")
                rankings = fallback_rankings([(c.id, current_score(c)) for c in ordered])

        if persist:
            await self.save_rankings(job_id, rankings, existing_scores=scores)
        return rankings

    async def save_rankings(
        self,
        job_id: Any,
        rankings: Sequence[RankedCandidate],
        existing_scores: Optional[Dict[Any, Optional[ScoreBreakdown]]] = None
    ) -> None:
        """
        Write ai_rank/ai_rank_reason for each ranked candidate, creating a
        zero-valued placeholder score first where none exists.

        Raises:
            PersistenceError: if any store call fails
        """
        try:
            for ranking in rankings:
                existing = None
                if existing_scores is not None:
                    existing = existing_scores.get(ranking.candidate_id)
                if existing is None:
                    existing = await self.store.get_score(ranking.candidate_id, job_id)

                if existing is None:
                    await self.store.save_score(ScoreBreakdown(
                        candidate_id=ranking.candidate_id,
                        job_id=job_id,
                        explanation=PLACEHOLDER_EXPLANATION,
                        weights=self.default_weights,
                    ))

                await self.store.update_ai_ranking(
                    ranking.candidate_id, job_id, ranking.rank, ranking.reason
                )
        except PersistenceError:
            logger.error(f"Failed to save AI rankings for job {job_id}")
            raise
        except Exception as e:
            logger.error(f"Failed to save AI rankings for job {job_id}: {e}")
            raise PersistenceError(f"Failed to save AI rankings for job {job_id}: {e}") from e

        logger.info(f"Saved {len(rankings)} AI rankings for job {job_id}")

    def clear_cache(self, job_id: Optional[Any] = None) -> int:
        return self.cache.clear(job_id)
