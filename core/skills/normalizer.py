#!/usr/bin/env python3
"""
Skill Normalizer - Canonical skill tokens and synonym clusters.

Skill strings arrive in many spellings ("React.js", "react", "ReactJS"). Every
skill comparison goes through ``normalize`` and ``expand`` so formatting
differences never cause a false negative.
"""

import re
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from core.config_loader import SKILL_SYNONYMS

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]')


def normalize_skill(skill: Optional[str]) -> str:
    """Lower-case, trim and strip every non-alphanumeric character."""
    if not skill:
        return ""
    return _NON_ALNUM.sub('', str(skill).lower().strip())


class SkillNormalizer:
    """
    Resolves skills to canonical tokens and expands configured synonyms.

    The synonym table maps a canonical skill to its alternative spellings.
    Each entry forms a group, and groups sharing a token are merged. ``expand``
    of any group member yields the whole group; any other token expands to
    itself. Two skills match when their expansions intersect, so "js",
    "javascript" and "node.js" all match one another.
    """

    def __init__(self, synonyms: Optional[Dict[str, List[str]]] = None):
        table = SKILL_SYNONYMS if synonyms is None else synonyms
        self._expansions: Dict[str, FrozenSet[str]] = {}
        for canonical, alternatives in table.items():
            group = {t for t in (normalize_skill(s) for s in [canonical, *alternatives]) if t}
            for token in list(group):
                group |= self._expansions.get(token, frozenset())
            merged = frozenset(group)
            for token in merged:
                self._expansions[token] = merged

    def normalize(self, skill: Optional[str]) -> str:
        return normalize_skill(skill)

    def expand(self, token: str) -> FrozenSet[str]:
        """Return ``token`` plus any synonym tokens. Unknown tokens expand to themselves."""
        expansion = self._expansions.get(token)
        if expansion is not None:
            return expansion
        return frozenset({token}) if token else frozenset()

    def expand_skill(self, skill: Optional[str]) -> FrozenSet[str]:
        return self.expand(self.normalize(skill))

    def expand_all(self, skills: Iterable[str]) -> Set[str]:
        """Union of expansions for a whole skill list (e.g. a candidate profile)."""
        tokens: Set[str] = set()
        for skill in skills:
            tokens.update(self.expand_skill(skill))
        return tokens

    def matches(self, skill: str, expanded_pool: Set[str]) -> bool:
        """True if ``skill`` (after expansion) intersects an already-expanded pool."""
        return not self.expand_skill(skill).isdisjoint(expanded_pool)
