"""
OpenAI Service - Ranking and similarity collaborators using the OpenAI API.

Works against api.openai.com or any OpenAI-compatible endpoint (base_url).
"""
from typing import Dict, Any, List, Optional, Sequence
import logging
import re

import openai
from openai import AsyncOpenAI
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState
from core.exceptions import MalformedUpstreamResponseError, UpstreamUnavailableError
from core.llm.interfaces import RankingProvider, SimilarityProvider
from core.llm.system_prompts import (
    RANKING_SYSTEM_PROMPT,
    RANKING_USER_PROMPT_TEMPLATE,
    CANDIDATE_LINE_TEMPLATE,
)
from core.utils import cosine_similarity

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

def _is_retryable(exc: BaseException) -> bool:
    """Return True for transient errors that are worth retrying."""
    return isinstance(exc, (
        openai.RateLimitError,
        openai.APITimeoutError,
        openai.APIConnectionError,
        openai.InternalServerError,
    ))


def _is_model_unavailable(exc: BaseException) -> bool:
    """Return True when the endpoint rejected the model itself (try the next one)."""
    return isinstance(exc, (openai.NotFoundError, openai.BadRequestError))


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _parse_reset_duration(value: str) -> float:
    """Parse an OpenAI reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Longest declared wait from retry-after / x-ratelimit-reset-* headers, or 0.0."""
    try:
        headers = exc.response.headers
        candidates: list[float] = []

        retry_after = headers.get("retry-after", "")
        if retry_after:
            try:
                candidates.append(float(retry_after))
            except ValueError:
                pass

        for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
            parsed = _parse_reset_duration(headers.get(header, ""))
            if parsed > 0:
                candidates.append(parsed)

        return max(candidates) if candidates else 0.0
    except Exception:
        return 0.0


def _backoff(min_seconds: float, max_seconds: float):
    """Build a tenacity wait that honours rate-limit headers, else exponential backoff."""
    exp = wait_exponential(multiplier=1, min=min_seconds, max=max_seconds)

    def _wait(retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception()
        if isinstance(exc, openai.RateLimitError):
            wait = _wait_from_rate_limit_headers(exc)
            if wait > 0:
                return min(wait, max_seconds)
        return exp(retry_state)

    return _wait


# ---------------------------------------------------------------------------
# Prompt building
# ---------------------------------------------------------------------------

def build_ranking_messages(
    job_summary: Dict[str, Any],
    candidate_summaries: Sequence[Dict[str, Any]]
) -> List[Dict[str, str]]:
    """Render job + candidate summaries into chat messages."""
    lines = []
    for position, c in enumerate(candidate_summaries, start=1):
        role = c.get('lastRoleTitle') or 'Not specified'
        if c.get('roleIsInferred'):
            role = f"{role} (inferred)"
        missing = c.get('missingMustHave') or []
        lines.append(CANDIDATE_LINE_TEMPLATE.format(
            position=position,
            name=c.get('name', ''),
            id=c.get('id'),
            years=c.get('yearsExperience', 0),
            role=role,
            skill_count=c.get('skillCount', 0),
            skills=", ".join(c.get('skills') or []) or 'None listed',
            skill_match=c.get('skillMatchPercentage', 0),
            current_score=c.get('currentScore', 0),
            missing=", ".join(missing) if missing else 'None',
            gaps=c.get('experienceGaps', 0),
        ))

    user_prompt = RANKING_USER_PROMPT_TEMPLATE.format(
        count=len(candidate_summaries),
        job_title=job_summary.get('title', ''),
        must=", ".join(job_summary.get('must') or []) or 'None specified',
        nice=", ".join(job_summary.get('nice') or []) or 'None specified',
        candidates="\n".join(lines),
    )

    return [
        {"role": "system", "content": RANKING_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def _build_client(
    api_key: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float]
) -> AsyncOpenAI:
    client_kwargs: Dict[str, Any] = {}
    if api_key:
        client_kwargs['api_key'] = api_key
    if base_url:
        client_kwargs['base_url'] = base_url
    if timeout:
        client_kwargs['timeout'] = timeout
    return AsyncOpenAI(**client_kwargs)


class OpenAIRankingService(RankingProvider):
    """
    Ranking collaborator backed by chat completions in JSON mode.

    Models are tried in priority order. Each model gets ``max_attempts``
    attempts with exponential backoff on transient errors; a model the
    endpoint rejects (404/400) falls through to the next model immediately.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        models: Optional[List[str]] = None,
        temperature: float = 0.1,
        seed: Optional[int] = 42,
        max_attempts: int = 3,
        backoff_min_seconds: float = 2.0,
        backoff_max_seconds: float = 30.0,
        request_timeout_seconds: Optional[float] = 60.0,
        client: Optional[AsyncOpenAI] = None
    ):
        self.client = client or _build_client(api_key, base_url, request_timeout_seconds)
        self.models = list(models or ["gpt-4o"])
        self.temperature = temperature
        self.seed = seed
        self.max_attempts = max(1, max_attempts)
        self.backoff_min_seconds = backoff_min_seconds
        self.backoff_max_seconds = backoff_max_seconds

    async def _complete(self, model: str, messages: List[Dict[str, str]]) -> str:
        request: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
        }
        if self.seed is not None:
            request["seed"] = self.seed

        async for attempt in AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            wait=_backoff(self.backoff_min_seconds, self.backoff_max_seconds),
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                response = await self.client.chat.completions.create(**request)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise MalformedUpstreamResponseError(f"Empty completion from {model}")
        return content

    async def rank(self, job_summary: Dict[str, Any], candidate_summaries: List[Dict[str, Any]]) -> Any:
        messages = build_ranking_messages(job_summary, candidate_summaries)
        last_error: Optional[BaseException] = None

        for model in self.models:
            logger.info(f"Requesting ranking of {len(candidate_summaries)} candidates from {model}")
            try:
                content = await self._complete(model, messages)
            except MalformedUpstreamResponseError:
                raise
            except Exception as e:
                if _is_model_unavailable(e):
                    logger.warning(f"Model {model} not available, trying next: {e}")
                    last_error = e
                    continue
                raise UpstreamUnavailableError(f"Ranking request to {model} failed: {e}") from e

            logger.info(f"Ranking answered by {model}")
            return content

        raise UpstreamUnavailableError(
            f"No ranking model available (tried {', '.join(self.models)}): {last_error}"
        )


class OpenAISimilarityService(SimilarityProvider):
    """Semantic similarity via embeddings and cosine similarity."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        embedding_model: str = "text-embedding-3-small",
        request_timeout_seconds: Optional[float] = 30.0,
        client: Optional[AsyncOpenAI] = None
    ):
        self.client = client or _build_client(api_key, base_url, request_timeout_seconds)
        self.embedding_model = embedding_model

    async def similarity(self, text_a: str, text_b: str) -> float:
        response = await self.client.embeddings.create(
            input=[text_a, text_b],
            model=self.embedding_model,
        )
        if len(response.data) < 2:
            raise UpstreamUnavailableError(
                f"Expected 2 embeddings, got {len(response.data)}"
            )
        embeddings = sorted(response.data, key=lambda d: d.index)
        return cosine_similarity(embeddings[0].embedding, embeddings[1].embedding)

