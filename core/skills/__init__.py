"""Skills Module - Skill canonicalization and synonym expansion."""
from core.skills.normalizer import SkillNormalizer, normalize_skill

__all__ = ['SkillNormalizer', 'normalize_skill']
