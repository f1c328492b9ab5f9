"""
Collaborator Interfaces - Abstract bases for external AI services.

The core only depends on these; which backend answers (OpenAI, a local
OpenAI-compatible server, a test double) is a wiring decision.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class SimilarityProvider(ABC):
    """
    Abstract interface for text-similarity services.
    """

    @abstractmethod
    async def similarity(self, text_a: str, text_b: str) -> float:
        """
        Return semantic similarity of two short texts in [0, 1].

        May raise or time out; callers must have a fallback.
        """
        pass


class RankingProvider(ABC):
    """
    Abstract interface for holistic candidate ranking services.
    """

    @abstractmethod
    async def rank(self, job_summary: Dict[str, Any], candidate_summaries: List[Dict[str, Any]]) -> Any:
        """
        Rank candidates for a job.

        Returns the collaborator payload: JSON text or an already decoded
        object, expected to hold ``{"rankings": [{candidateId, rank, reason}]}``.
        The payload is untrusted and may be incomplete, duplicated or malformed.
        """
        pass
