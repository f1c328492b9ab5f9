from dataclasses import dataclass
from typing import Optional
import logging

from core.cache import ScoreCache
from core.config_loader import AppConfig, LlmConfig
from core.llm.openai_service import OpenAIRankingService, OpenAISimilarityService
from core.ranking import AIRankingReconciler
from core.scorer import BatchScoringOrchestrator, ScoringEngine
from core.service import CandidateRankingService
from core.skills import SkillNormalizer
from database.database import build_engine, build_session_factory, init_db
from database.interfaces import ScoringStore
from database.store import SqlAlchemyStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    This eliminates duplicate wiring code and provides a single source
    of truth for service instantiation.
    """
    config: AppConfig
    store: ScoringStore
    cache: ScoreCache
    service: CandidateRankingService
    ranking_service: Optional[OpenAIRankingService] = None
    similarity_service: Optional[OpenAISimilarityService] = None

    @classmethod
    def build(
        cls,
        config: AppConfig,
        store: Optional[ScoringStore] = None,
        create_tables: bool = True
    ) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            store: Store to use instead of the configured database
            create_tables: Create missing tables when building the SQL store

        Returns:
            Fully wired AppContext instance
        """
        if store is None:
            store = cls._build_store(config, create_tables)

        ranking_service = cls._build_ranking_service(config.llm)
        similarity_service = None
        if config.scoring.use_title_similarity:
            similarity_service = cls._build_similarity_service(config.llm)

        normalizer = SkillNormalizer(config.scoring.skill_synonyms)
        cache = ScoreCache(ttl_seconds=config.cache.ttl_seconds)

        engine = ScoringEngine(
            store=store,
            config=config.scoring,
            normalizer=normalizer,
            similarity_provider=similarity_service,
        )
        orchestrator = BatchScoringOrchestrator(
            engine=engine,
            cache=cache,
            batch_size=config.cache.batch_size,
        )
        reconciler = AIRankingReconciler(
            store=store,
            ranking_provider=ranking_service,
            cache=cache,
            normalizer=normalizer,
            default_weights=config.scoring.default_weights,
            timeout_seconds=config.llm.ranking_timeout_seconds,
            cache_ttl_seconds=config.cache.ranking_ttl_seconds,
            batch_size=config.cache.batch_size,
        )

        return cls(
            config=config,
            store=store,
            cache=cache,
            service=CandidateRankingService(engine, orchestrator, reconciler),
            ranking_service=ranking_service,
            similarity_service=similarity_service,
        )

    @staticmethod
    def _build_store(config: AppConfig, create_tables: bool) -> SqlAlchemyStore:
        engine = build_engine(config.database.url)
        if create_tables:
            init_db(engine)
        return SqlAlchemyStore(build_session_factory(engine))

    @staticmethod
    def _build_ranking_service(llm_config: LlmConfig) -> Optional[OpenAIRankingService]:
        """Build the ranking collaborator, or None when no API key is configured."""
        if not llm_config.api_key:
            logger.warning("No LLM API key configured; AI ranking will use algorithmic fallback")
            return None
        return OpenAIRankingService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            models=llm_config.ranking_models,
            temperature=llm_config.ranking_temperature,
            seed=llm_config.seed,
            max_attempts=llm_config.max_attempts,
            backoff_min_seconds=llm_config.backoff_min_seconds,
            backoff_max_seconds=llm_config.backoff_max_seconds,
            request_timeout_seconds=llm_config.request_timeout_seconds,
        )

    @staticmethod
    def _build_similarity_service(llm_config: LlmConfig) -> Optional[OpenAISimilarityService]:
        if not llm_config.api_key:
            return None
        return OpenAISimilarityService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            embedding_model=llm_config.embedding_model,
            request_timeout_seconds=llm_config.request_timeout_seconds,
        )
