"""Score Cache - In-process TTL + content-hash cache for scores and rankings."""
import copy
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, NamedTuple, Optional

from core.models import ScoreWeights
from core.utils import ContentFingerprinter

logger = logging.getLogger(__name__)

# 30 minutes
CACHE_TTL_SECONDS = 30 * 60

SCORE_NAMESPACE = "score"
RANKING_NAMESPACE = "ranking"


class CacheKey(NamedTuple):
    """Composite key; ``job_id`` is kept as its own field so a job can be cleared exactly."""
    namespace: str
    job_id: Any
    discriminator: str


@dataclass
class _CacheEntry:
    value: Any
    content_hash: str
    stored_at: float
    ttl_seconds: float


def weights_key(weights: ScoreWeights) -> str:
    return json.dumps(weights.to_dict(), sort_keys=True)


def make_score_key(candidate_id: Any, job_id: Any, weights: ScoreWeights) -> CacheKey:
    """Key for one candidate/job/weights score."""
    return CacheKey(SCORE_NAMESPACE, job_id, f"{candidate_id}:{weights_key(weights)}")


def make_ranking_key(job_id: Any, candidate_ids) -> CacheKey:
    """Key for an AI ranking over a specific candidate set (order-independent)."""
    ids = ",".join(str(c) for c in sorted(candidate_ids, key=str))
    return CacheKey(RANKING_NAMESPACE, job_id, ids)


def content_hash(data: Any) -> str:
    return ContentFingerprinter.calculate(data)


class ScoreCache:
    """
    Cache for computed scores and AI rankings.

    An entry is served only while it is younger than its TTL and its stored
    content hash equals the hash the caller computes from current inputs.
    Anything else counts as a miss. Values are deep-copied on the way in and
    out so callers can never mutate a cached entry.

    The clock is injectable (defaults to ``time.monotonic``) so TTL behaviour
    can be tested without sleeping.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: Dict[CacheKey, _CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: CacheKey, expected_hash: str) -> Optional[Any]:
        """Return the cached value if fresh and matching ``expected_hash``, else None."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            logger.debug(f"Cache miss for {key.namespace}:{key.job_id}:{key.discriminator}")
            return None

        age = self._clock() - entry.stored_at
        if age >= entry.ttl_seconds:
            self._misses += 1
            del self._entries[key]
            logger.debug(f"Cache entry expired for {key.namespace}:{key.job_id} (age {age:.0f}s)")
            return None

        if entry.content_hash != expected_hash:
            self._misses += 1
            logger.debug(f"Cache entry stale for {key.namespace}:{key.job_id} (content changed)")
            return None

        self._hits += 1
        logger.debug(f"Cache hit for {key.namespace}:{key.job_id}:{key.discriminator}")
        return copy.deepcopy(entry.value)

    def set(
        self,
        key: CacheKey,
        value: Any,
        content_hash: str,
        ttl_seconds: Optional[float] = None
    ) -> None:
        self.purge_expired()
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        self._entries[key] = _CacheEntry(
            value=copy.deepcopy(value),
            content_hash=content_hash,
            stored_at=self._clock(),
            ttl_seconds=ttl,
        )

    def purge_expired(self) -> int:
        """Drop every entry past its TTL. Returns the number removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now - e.stored_at >= e.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def clear(self, job_id: Optional[Any] = None) -> int:
        """
        Remove every entry for ``job_id`` (all namespaces), or everything when
        no job is given. Returns the number of entries removed.
        """
        if job_id is None:
            removed = len(self._entries)
            self._entries.clear()
            logger.info(f"Cleared {removed} entries from score cache")
            return removed

        keys = [k for k in self._entries if k.job_id == job_id]
        for key in keys:
            del self._entries[key]
        logger.info(f"Cleared {len(keys)} cache entries for job {job_id}")
        return len(keys)

    def __len__(self) -> int:
        return len(self._entries)

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        lookups = self._hits + self._misses
        return {
            "entries": len(self),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": (self._hits / lookups) if lookups else 0.0,
            "ttl_seconds": self.ttl_seconds,
        }
