#!/usr/bin/env python3
"""
Factor Calculations - Seniority, recency and employment-gap scoring.

Each factor is a stepped lookup against a table from ScoringConfig. All
functions are total: malformed or missing input falls back to the neutral
value instead of raising.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from core.config_loader import ScoringConfig
from core.models import Candidate, EmploymentGap

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30.0


def _step_at_least(value: float, steps: Sequence[Tuple[float, float]], default: float) -> float:
    """First score whose threshold ``value`` reaches (descending thresholds)."""
    for threshold, score in steps:
        if value >= threshold:
            return float(score)
    return float(default)


def _step_at_most(value: float, steps: Sequence[Tuple[float, float]], default: float) -> float:
    """First score whose threshold ``value`` does not exceed (ascending thresholds)."""
    for threshold, score in steps:
        if value <= threshold:
            return float(score)
    return float(default)


def calculate_seniority_score(years_experience: Optional[float], config: ScoringConfig) -> float:
    """
    Seniority from years of experience: >=8 -> 100, >=5 -> 85, >=3 -> 70,
    >=1 -> 55, otherwise 30. Unknown experience is neutral (50).
    """
    if years_experience is None:
        return config.seniority_missing
    try:
        years = float(years_experience)
    except (TypeError, ValueError):
        return config.seniority_missing
    return _step_at_least(years, config.seniority_steps, config.seniority_below_floor)


def months_since(moment: datetime, now: datetime) -> float:
    """Elapsed months (30-day months) between two instants, never negative."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed_days = (now - moment).total_seconds() / 86400.0
    return max(0.0, elapsed_days / DAYS_PER_MONTH)


def last_activity(candidate: Candidate) -> Optional[datetime]:
    return candidate.last_active_at or candidate.created_at


def calculate_recency_score(
    last_activity_at: Optional[datetime],
    now: datetime,
    config: ScoringConfig
) -> float:
    """
    Recency from months since last recorded activity: <=1 -> 100, <=3 -> 90,
    <=6 -> 80, <=12 -> 70, otherwise 50. No recorded activity counts as current.
    """
    if last_activity_at is None:
        return float(config.recency_steps[0][1]) if config.recency_steps else config.recency_beyond
    return _step_at_most(months_since(last_activity_at, now), config.recency_steps, config.recency_beyond)


def _gap_months(gap: EmploymentGap) -> float:
    if gap.months is not None:
        try:
            return float(gap.months)
        except (TypeError, ValueError):
            pass

    if gap.start and gap.end:
        try:
            start = date_parser.parse(gap.start)
            end = date_parser.parse(gap.end)
        except (ValueError, OverflowError, TypeError):
            logger.debug(f"Unparseable gap dates: {gap.start} - {gap.end}")
            return 0.0
        diff = relativedelta(end, start)
        return float(max(0, diff.years * 12 + diff.months))

    return 0.0


def total_gap_months(gaps: Iterable[EmploymentGap]) -> float:
    return max(0.0, sum(_gap_months(gap) for gap in gaps or []))


def calculate_gap_penalty(gaps: Optional[List[EmploymentGap]], config: ScoringConfig) -> float:
    """
    Deduction from total gap months: 0 -> 0, <=3 -> 5, <=6 -> 15,
    <=12 -> 25, otherwise 40.
    """
    if not gaps:
        return 0.0
    return _step_at_most(total_gap_months(gaps), config.gap_penalty_steps, config.gap_penalty_beyond)
