"""Cache Module - Caching services."""
from core.cache.score_cache import (
    ScoreCache,
    CacheKey,
    make_score_key,
    make_ranking_key,
    content_hash,
    CACHE_TTL_SECONDS,
    SCORE_NAMESPACE,
    RANKING_NAMESPACE,
)

__all__ = [
    'ScoreCache',
    'CacheKey',
    'make_score_key',
    'make_ranking_key',
    'content_hash',
    'CACHE_TTL_SECONDS',
    'SCORE_NAMESPACE',
    'RANKING_NAMESPACE',
]
