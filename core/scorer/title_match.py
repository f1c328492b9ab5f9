#!/usr/bin/env python3
"""
Title Matching - Candidate role title vs job title.

Exact (case-insensitive) titles score 100. Otherwise the semantic similarity
collaborator is consulted and the higher of its score and the traditional
keyword heuristic wins. The collaborator is fallible; any failure degrades to
the heuristic alone.
"""

from typing import List, Optional
import logging
import math
import re

from core.llm.interfaces import SimilarityProvider
from core.utils import round_half_up

logger = logging.getLogger(__name__)

NEUTRAL_TITLE_SCORE = 50.0
EXACT_TITLE_SCORE = 100.0

_WORD = re.compile(r'[a-z0-9]+')


def _seniority_index(title: str, levels: List[str]) -> int:
    words = set(_WORD.findall(title))
    for index, level in enumerate(levels):
        if level in words:
            return index
    return -1


def calculate_traditional_title_score(candidate_title: str, job_title: str, levels: List[str]) -> float:
    """
    Keyword heuristic.

    Both titles carrying a seniority keyword: max(50, 100 - 15 * level distance).
    Otherwise: min(90, shared words * 20 + 30).
    """
    candidate_lower = candidate_title.lower()
    job_lower = job_title.lower()

    candidate_level = _seniority_index(candidate_lower, levels)
    job_level = _seniority_index(job_lower, levels)
    if candidate_level >= 0 and job_level >= 0:
        return float(max(50, 100 - abs(candidate_level - job_level) * 15))

    job_words = set(job_lower.split())
    matches = sum(1 for word in candidate_lower.split() if word in job_words)
    return float(min(90, matches * 20 + 30))


async def calculate_title_score(
    candidate_title: Optional[str],
    job_title: Optional[str],
    levels: List[str],
    similarity_provider: Optional[SimilarityProvider] = None
) -> float:
    """Title score in [0, 100]; a missing title on either side is neutral (50)."""
    if not candidate_title or not candidate_title.strip() or not job_title or not job_title.strip():
        return NEUTRAL_TITLE_SCORE

    if candidate_title.strip().lower() == job_title.strip().lower():
        return EXACT_TITLE_SCORE

    traditional = calculate_traditional_title_score(candidate_title, job_title, levels)
    if similarity_provider is None:
        return traditional

    try:
        similarity = float(await similarity_provider.similarity(candidate_title, job_title))
    except Exception as e:
        logger.warning(f"Title similarity unavailable, using keyword heuristic: {e}")
        return traditional

    if not math.isfinite(similarity):
        logger.warning(f"Title similarity returned {similarity}, using keyword heuristic")
        return traditional

    ai_score = round_half_up(max(0.0, min(1.0, similarity)) * 100)
    return float(max(ai_score, traditional))
