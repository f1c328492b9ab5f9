#!/usr/bin/env python3
"""
Ranking Response Parsing - Untrusted collaborator payload to a tagged result.

``parse_ranking_payload`` never raises. Individual tuples that fail
validation are dropped; a payload with no usable tuple at all is malformed.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_AI_REASON = "Evaluated based on technical fit and experience"


class RankingTuple(BaseModel):
    """One ``{candidateId, rank, reason}`` entry as returned by the collaborator."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    candidate_id: Union[int, str] = Field(alias='candidateId')
    rank: int = Field(ge=1)
    reason: str = DEFAULT_AI_REASON

    @field_validator('candidate_id', 'rank', mode='before')
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be an integer or string, not a boolean")
        return value

    @field_validator('reason', mode='before')
    @classmethod
    def _default_blank_reason(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_AI_REASON
        return str(value)


@dataclass
class RankingOk:
    entries: List[RankingTuple] = field(default_factory=list)


@dataclass
class MalformedResponse:
    reason: str
    payload: Any = None


@dataclass
class UpstreamError:
    error: BaseException


RankingResult = Union[RankingOk, MalformedResponse, UpstreamError]


def parse_ranking_payload(payload: Any) -> RankingResult:
    """Decode and validate a ranking payload (JSON text or decoded object)."""
    if payload is None:
        return MalformedResponse("empty response", payload)

    data = payload
    if isinstance(payload, (str, bytes)):
        if not payload.strip():
            return MalformedResponse("empty response", payload)
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return MalformedResponse(f"invalid JSON: {e}", payload)

    if not isinstance(data, dict):
        return MalformedResponse("payload is not a JSON object", payload)

    raw_rankings = data.get('rankings')
    if not isinstance(raw_rankings, list):
        return MalformedResponse("missing rankings array", payload)
    if not raw_rankings:
        return MalformedResponse("empty rankings array", payload)

    entries: List[RankingTuple] = []
    for index, item in enumerate(raw_rankings):
        try:
            entries.append(RankingTuple.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Dropping invalid ranking entry #{index}: {e.error_count()} error(s)")

    if not entries:
        return MalformedResponse("no valid ranking entries", payload)

    dropped = len(raw_rankings) - len(entries)
    if dropped:
        logger.warning(f"Dropped {dropped} invalid ranking entries")
    return RankingOk(entries)
