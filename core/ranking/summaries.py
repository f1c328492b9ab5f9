#!/usr/bin/env python3
"""
Candidate Summaries - What the ranking collaborator is told about each candidate.

When a candidate has no parsed role title, ``infer_role_title`` guesses one
from name and skill keywords. The guess is always returned with
``is_inferred=True`` and never written back to the candidate.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.models import Candidate, Job, ScoreBreakdown
from core.scorer.coverage import calculate_skill_match_percentage, find_missing_must_have
from core.skills import SkillNormalizer

# Placeholder strings upstream parsers have been seen to store instead of NULL.
_MISSING_TITLES = {'', 'null', 'none', 'not specified'}

# (keywords, label) checked in order; first hit wins.
NAME_ROLE_HINTS: List[Tuple[Tuple[str, ...], str]] = [
    (('qa', 'test'), 'QA/Test Engineer'),
    (('sdet',), 'SDET'),
    (('senior',), 'Senior Engineer'),
]
SKILL_ROLE_HINTS: List[Tuple[Tuple[str, ...], str]] = [
    (('selenium', 'test', 'qa'), 'QA Engineer'),
    (('java', 'python'), 'Software Engineer'),
]
DEFAULT_INFERRED_ROLE = 'Technical Professional'


def has_role_title(title: Optional[str]) -> bool:
    return bool(title) and title.strip().lower() not in _MISSING_TITLES


def infer_role_title(candidate: Candidate) -> Tuple[str, bool]:
    """
    Best-effort role label.

    Returns:
        (title, is_inferred). Parsed titles come back unchanged with False.
    """
    if has_role_title(candidate.last_role_title):
        return candidate.last_role_title.strip(), False

    name = (candidate.name or '').lower()
    for keywords, label in NAME_ROLE_HINTS:
        if any(k in name for k in keywords):
            return label, True

    skills = ' '.join(s.lower() for s in candidate.skills)
    for keywords, label in SKILL_ROLE_HINTS:
        if any(k in skills for k in keywords):
            return label, True

    return DEFAULT_INFERRED_ROLE, True


def build_job_summary(job: Job) -> Dict[str, Any]:
    return {
        'id': job.id,
        'title': job.title,
        'must': list(job.must),
        'nice': list(job.nice),
    }


def build_candidate_summary(
    candidate: Candidate,
    job: Job,
    score: Optional[ScoreBreakdown],
    normalizer: SkillNormalizer
) -> Dict[str, Any]:
    role, is_inferred = infer_role_title(candidate)
    if score is not None:
        missing = list(score.missing_must_have)
    else:
        missing = find_missing_must_have(candidate.skills, job.must, normalizer)

    return {
        'id': candidate.id,
        'name': candidate.name,
        'yearsExperience': candidate.years_experience or 0,
        'lastRoleTitle': role,
        'roleIsInferred': is_inferred,
        'skills': list(candidate.skills),
        'skillCount': len(candidate.skills),
        'skillMatchPercentage': calculate_skill_match_percentage(
            candidate.skills, job.must, job.nice, normalizer
        ),
        'currentScore': score.total_score if score is not None else 0,
        'missingMustHave': missing,
        'experienceGaps': len(candidate.experience_gaps),
    }


def ranking_input_fingerprint(job: Job, candidates: Sequence[Candidate]) -> Dict[str, Any]:
    """Inputs whose change invalidates a cached ranking."""
    return {
        'jobTitle': job.title,
        'requirements': {'must': list(job.must), 'nice': list(job.nice)},
        'candidates': [
            {
                'id': c.id,
                'experience': c.years_experience,
                'skills': list(c.skills),
                'lastRole': c.last_role_title,
            }
            for c in sorted(candidates, key=lambda c: str(c.id))
        ],
    }
