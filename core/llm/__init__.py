"""LLM Module - External AI collaborators and interfaces."""
from core.llm.interfaces import SimilarityProvider, RankingProvider
from core.llm.openai_service import OpenAIRankingService, OpenAISimilarityService

__all__ = [
    'SimilarityProvider',
    'RankingProvider',
    'OpenAIRankingService',
    'OpenAISimilarityService',
]
