"""Ranking Module - AI ranking reconciliation and rank repair."""
from core.ranking.parsing import (
    RankingTuple,
    RankingOk,
    MalformedResponse,
    UpstreamError,
    parse_ranking_payload,
)
from core.ranking.repair import repair_rankings, fallback_rankings
from core.ranking.summaries import infer_role_title, build_candidate_summary, build_job_summary
from core.ranking.reconciler import AIRankingReconciler

__all__ = [
    'AIRankingReconciler',
    'RankingTuple',
    'RankingOk',
    'MalformedResponse',
    'UpstreamError',
    'parse_ranking_payload',
    'repair_rankings',
    'fallback_rankings',
    'infer_role_title',
    'build_candidate_summary',
    'build_job_summary',
]
