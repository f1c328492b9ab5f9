#!/usr/bin/env python3
"""
Explanation Generation - Plain-language summary of a score breakdown.

Built purely from the breakdown, candidate name/experience and job title so
the same inputs always yield the same text.
"""

from typing import List, Optional, Sequence

MATCH_QUALITY_BANDS = [
    (160, "excellent"),
    (140, "very good"),
    (120, "good"),
    (100, "fair"),
]


def get_match_quality(combined_score: float) -> str:
    """Quality label from skill match + title score (0-200)."""
    for threshold, label in MATCH_QUALITY_BANDS:
        if combined_score >= threshold:
            return label
    return "poor"


def _format_years(years: float) -> str:
    return f"{years:g}"


def generate_explanation(
    candidate_name: str,
    job_title: str,
    years_experience: Optional[float],
    skill_match_score: float,
    title_score: float,
    gap_penalty: float,
    missing_must_have: Sequence[str]
) -> str:
    parts: List[str] = []

    quality = get_match_quality(skill_match_score + title_score)
    parts.append(f"{candidate_name} is a {quality} match for the {job_title} position.")

    if not missing_must_have:
        parts.append("The candidate meets all required technical skills.")
    else:
        parts.append(
            f"However, they are missing {len(missing_must_have)} critical skill(s): "
            f"{', '.join(missing_must_have)}."
        )

    if years_experience:
        if years_experience >= 5:
            parts.append(
                f"With {_format_years(years_experience)} years of experience, "
                "they demonstrate strong seniority for this role."
            )
        else:
            parts.append(
                f"With {_format_years(years_experience)} years of experience, "
                "they may need additional mentoring."
            )

    if title_score >= 80:
        parts.append("Their current role aligns well with the position requirements.")
    elif title_score >= 60:
        parts.append("Their current role has some relevance to the position.")
    else:
        parts.append("Their current role differs significantly from the position requirements.")

    if gap_penalty == 0:
        parts.append("The candidate shows consistent employment history with no significant gaps.")
    elif gap_penalty <= 15:
        parts.append("There are minor employment gaps that should be discussed during interview.")
    else:
        parts.append("There are significant employment gaps that require clarification.")

    return " ".join(parts)
