#!/usr/bin/env python3
"""
Skill Coverage - How much of a job's skill list a candidate covers.

Required skills are worth 80 points and preferred skills 20. When the job
defines only one category it carries the full 100; a job with no skills
scores 0.
"""

from typing import List, Sequence
import logging

from core.models import JobSkill
from core.scorer.models import SkillMatchResult
from core.skills import SkillNormalizer
from core.utils import round_half_up

logger = logging.getLogger(__name__)

REQUIRED_SHARE = 80.0
PREFERRED_SHARE = 20.0


def calculate_skill_match(
    candidate_skills: Sequence[str],
    job_skills: Sequence[JobSkill],
    normalizer: SkillNormalizer
) -> SkillMatchResult:
    """
    Score candidate skills against required/preferred job skills.

    Unmatched required skills are reported verbatim, in job order.

    Returns:
        SkillMatchResult with a 0-100 score and the missing must-haves
    """
    if not job_skills:
        return SkillMatchResult(score=0, missing_must_have=[])

    candidate_pool = normalizer.expand_all(candidate_skills)

    required = [s for s in job_skills if s.required]
    preferred = [s for s in job_skills if not s.required]

    missing_must_have: List[str] = []
    matched_required = 0
    for job_skill in required:
        if normalizer.matches(job_skill.skill, candidate_pool):
            matched_required += 1
        else:
            missing_must_have.append(job_skill.skill)

    matched_preferred = sum(
        1 for job_skill in preferred if normalizer.matches(job_skill.skill, candidate_pool)
    )

    if required and preferred:
        score = (matched_required / len(required)) * REQUIRED_SHARE \
            + (matched_preferred / len(preferred)) * PREFERRED_SHARE
    elif required:
        score = (matched_required / len(required)) * 100.0
    else:
        score = (matched_preferred / len(preferred)) * 100.0

    logger.debug(
        f"Skill match: required {matched_required}/{len(required)}, "
        f"preferred {matched_preferred}/{len(preferred)} -> {score:.1f}"
    )

    return SkillMatchResult(
        score=round_half_up(score),
        missing_must_have=missing_must_have,
        matched_required=matched_required,
        total_required=len(required),
        matched_preferred=matched_preferred,
        total_preferred=len(preferred),
    )


def calculate_skill_match_percentage(
    candidate_skills: Sequence[str],
    must: Sequence[str],
    nice: Sequence[str],
    normalizer: SkillNormalizer
) -> int:
    """Must 70 / nice 30 split used in ranking summaries (no renormalization)."""
    candidate_pool = normalizer.expand_all(candidate_skills)
    must_matches = sum(1 for s in must if normalizer.matches(s, candidate_pool))
    nice_matches = sum(1 for s in nice if normalizer.matches(s, candidate_pool))

    must_part = (must_matches / len(must)) * 70 if must else 0.0
    nice_part = (nice_matches / len(nice)) * 30 if nice else 0.0
    return round_half_up(must_part + nice_part)


def find_missing_must_have(
    candidate_skills: Sequence[str],
    must: Sequence[str],
    normalizer: SkillNormalizer
) -> List[str]:
    """Required skills the candidate does not cover, verbatim and in job order."""
    candidate_pool = normalizer.expand_all(candidate_skills)
    return [skill for skill in must if not normalizer.matches(skill, candidate_pool)]
