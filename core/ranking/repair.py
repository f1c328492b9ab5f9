#!/usr/bin/env python3
"""
Rank Repair - Turn partial or inconsistent rankings into a 1..N permutation.

Both functions return exactly one entry per candidate with ranks 1..N,
whatever the collaborator sent.
"""

from typing import Any, Dict, List, Sequence, Set, Tuple
import logging

from core.models import RankedCandidate
from core.ranking.parsing import RankingTuple

logger = logging.getLogger(__name__)

UNRANKED_REASON = "Ranked based on algorithmic scoring"


def _format_points(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else f"{score:g}"


def repair_rankings(
    entries: Sequence[RankingTuple],
    candidate_ids: Sequence[Any]
) -> List[RankedCandidate]:
    """
    Accept tuples in received order while their rank is unclaimed and their
    candidate is known and not yet ranked. Uncovered candidates follow the
    highest accepted rank in ``candidate_ids`` order. The result is then
    renumbered 1..N.
    """
    known: Dict[str, Any] = {str(cid): cid for cid in candidate_ids}
    claimed_ranks: Set[int] = set()
    covered: Set[Any] = set()
    placed: List[Tuple[int, Any, str]] = []

    for entry in entries:
        candidate_id = known.get(str(entry.candidate_id))
        if candidate_id is None:
            logger.debug(f"Dropping ranking for unknown candidate {entry.candidate_id}")
            continue
        if candidate_id in covered:
            logger.debug(f"Dropping repeated ranking for candidate {candidate_id}")
            continue
        if entry.rank in claimed_ranks:
            logger.debug(f"Dropping duplicate rank {entry.rank} for candidate {candidate_id}")
            continue
        claimed_ranks.add(entry.rank)
        covered.add(candidate_id)
        placed.append((entry.rank, candidate_id, entry.reason))

    next_rank = max(claimed_ranks, default=0)
    missing = 0
    for candidate_id in candidate_ids:
        if candidate_id in covered:
            continue
        next_rank += 1
        missing += 1
        covered.add(candidate_id)
        placed.append((next_rank, candidate_id, UNRANKED_REASON))

    if missing:
        logger.warning(f"Ranking covered {len(candidate_ids) - missing}/{len(candidate_ids)} candidates; appended the rest")

    placed.sort(key=lambda item: item[0])
    return [
        RankedCandidate(candidate_id=candidate_id, rank=position, reason=reason)
        for position, (_, candidate_id, reason) in enumerate(placed, start=1)
    ]


def fallback_rankings(scored_candidates: Sequence[Tuple[Any, float]]) -> List[RankedCandidate]:
    """Deterministic order: ``(candidate_id, total_score)`` by score descending, ties in input order."""
    ordered = sorted(scored_candidates, key=lambda item: item[1], reverse=True)
    return [
        RankedCandidate(
            candidate_id=candidate_id,
            rank=position,
            reason=f"Ranked based on algorithmic scoring: {_format_points(score)} points",
        )
        for position, (candidate_id, score) in enumerate(ordered, start=1)
    ]
