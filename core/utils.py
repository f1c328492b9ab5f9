import hashlib
import json
import logging
import math
from typing import Any, Iterable, List, Sequence

import numpy as np

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def chunked(items: Sequence[Any], size: int) -> Iterable[List[Any]]:
    """Consecutive slices of at most ``size`` items."""
    items = list(items)
    for start in range(0, len(items), size):
        yield items[start:start + size]


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Cosine similarity between two embeddings, clipped to [0, 1].

    Returns 0.0 if the vectors differ in length or either is all zeros.
    """
    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)
    if a.shape != b.shape:
        logger.error(f"Embedding dimensions differ: {a.shape} vs {b.shape}")
        return 0.0

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(a, b) / (norm_a * norm_b))
    return max(0.0, min(1.0, similarity))


class ContentFingerprinter:
    """
    Pure logic for creating deterministic fingerprints of scoring inputs.
    """

    @staticmethod
    def calculate(data: Any) -> str:
        """
        SHA-256 of the normalized JSON form of ``data``.

        Dataclasses and other objects must be converted to plain dicts first;
        anything json cannot encode falls back to ``str``.
        """
        normalized = json.dumps(data, sort_keys=True, ensure_ascii=False, default=str)
        return hashlib.sha256(normalized.encode('utf-8')).hexdigest()[:32]
