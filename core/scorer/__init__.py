#!/usr/bin/env python3
"""
Scoring Module - Deterministic candidate scoring.

Public API:
- ScoringEngine: Scores one candidate against one job
- BatchScoringOrchestrator: Cached, batched scoring of many candidates
- SkillMatchResult: Skill component result

The module is split into focused, single-responsibility modules:

- models.py: Data structures (SkillMatchResult)
- coverage.py: Required/preferred skill coverage
- title_match.py: Title score (exact, semantic, keyword heuristic)
- factors.py: Seniority, recency and gap penalty step tables
- explanation.py: Plain-language explanation
- service.py: ScoringEngine
- batch.py: BatchScoringOrchestrator
"""

from core.scorer.models import SkillMatchResult
from core.scorer.service import ScoringEngine, combine_scores
from core.scorer.batch import BatchScoringOrchestrator

__all__ = ['ScoringEngine', 'BatchScoringOrchestrator', 'SkillMatchResult', 'combine_scores']
