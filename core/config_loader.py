import yaml
import os
from typing import List, Optional, Dict, Tuple
from pydantic import BaseModel, Field

from core.models import ScoreWeights


# Step tables are (threshold, score) pairs evaluated top to bottom.
# They are load-bearing for existing rankings; tune here, not in the formulas.
SENIORITY_STEPS: List[Tuple[float, float]] = [(8, 100), (5, 85), (3, 70), (1, 55)]
RECENCY_STEPS: List[Tuple[float, float]] = [(1, 100), (3, 90), (6, 80), (12, 70)]
GAP_PENALTY_STEPS: List[Tuple[float, float]] = [(0, 0), (3, 5), (6, 15), (12, 25)]
TITLE_SENIORITY_LEVELS: List[str] = ['junior', 'mid', 'senior', 'lead', 'principal', 'staff']

SKILL_SYNONYMS: Dict[str, List[str]] = {
    'javascript': ['js', 'node.js', 'nodejs', 'ecmascript'],
    'typescript': ['ts'],
    'python': ['py'],
    'react': ['react.js', 'reactjs'],
    'vue': ['vue.js', 'vuejs'],
    'angular': ['angularjs', 'angular.js'],
    'selenium': ['selenium webdriver', 'webdriver'],
    'qa': ['quality assurance', 'testing', 'test'],
    'api': ['rest api', 'restful', 'web services'],
    'sql': ['mysql', 'postgresql', 'database', 'rdbms'],
    'agile': ['scrum', 'kanban', 'sprint'],
    'java': ['j2ee', 'spring', 'java ee'],
    'aws': ['amazon web services', 'cloud', 'ec2', 's3'],
    'docker': ['containerization', 'kubernetes', 'k8s'],
    'jenkins': ['ci/cd', 'continuous integration', 'pipeline'],
    'git': ['github', 'gitlab', 'version control', 'vcs'],
}


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///candidate_ranking.db"


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    # Tried in order; a model the endpoint rejects falls through to the next one.
    ranking_models: List[str] = Field(default_factory=lambda: ["gpt-4o", "gpt-4o-mini"])
    embedding_model: str = "text-embedding-3-small"
    ranking_temperature: float = 0.1
    seed: Optional[int] = 42
    request_timeout_seconds: float = 60.0
    ranking_timeout_seconds: float = 120.0  # Upper bound on the whole dispatch, retries included
    max_attempts: int = 3  # Per model
    backoff_min_seconds: float = 2.0
    backoff_max_seconds: float = 30.0


class ScoringConfig(BaseModel):
    """
    Configuration for the deterministic scoring engine.

    The step tables default to the module-level constants above.
    """
    default_weights: ScoreWeights = Field(default_factory=ScoreWeights)
    seniority_steps: List[Tuple[float, float]] = Field(default_factory=lambda: list(SENIORITY_STEPS))
    seniority_below_floor: float = 30.0
    seniority_missing: float = 50.0
    recency_steps: List[Tuple[float, float]] = Field(default_factory=lambda: list(RECENCY_STEPS))
    recency_beyond: float = 50.0
    gap_penalty_steps: List[Tuple[float, float]] = Field(default_factory=lambda: list(GAP_PENALTY_STEPS))
    gap_penalty_beyond: float = 40.0
    title_seniority_levels: List[str] = Field(default_factory=lambda: list(TITLE_SENIORITY_LEVELS))
    skill_synonyms: Dict[str, List[str]] = Field(default_factory=lambda: dict(SKILL_SYNONYMS))
    use_title_similarity: bool = True


class CacheConfig(BaseModel):
    """Score cache and batch fan-out tuning."""
    ttl_seconds: int = 30 * 60
    ranking_ttl_seconds: int = 60 * 60
    batch_size: int = 10


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    # Allow env var override for LLM endpoint and key
    env_llm_base_url = os.environ.get("LLM_BASE_URL")
    if env_llm_base_url:
        data.setdefault('llm', {})
        data['llm']['base_url'] = env_llm_base_url

    env_api_key = os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        data.setdefault('llm', {})
        data['llm']['api_key'] = env_api_key.strip()

    return AppConfig(**data)
