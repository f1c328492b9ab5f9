#!/usr/bin/env python3
"""
Scoring Models - Intermediate results of the per-factor calculations.
"""

from typing import List
from dataclasses import dataclass, field


@dataclass
class SkillMatchResult:
    """Skill component score plus the required skills the candidate lacks."""
    score: float = 0.0
    missing_must_have: List[str] = field(default_factory=list)
    matched_required: int = 0
    total_required: int = 0
    matched_preferred: int = 0
    total_preferred: int = 0
