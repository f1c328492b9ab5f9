"""
Tests for AIRankingReconciler

Every path must end in one persisted rank per candidate, 1..N, whether the
collaborator answers well, badly, slowly or not at all.
"""
import pytest

from core.cache import ScoreCache
from core.exceptions import (
    JobNotFoundError,
    MalformedUpstreamResponseError,
    PersistenceError,
    UpstreamUnavailableError,
)
from core.models import Candidate, ScoreBreakdown
from core.ranking import AIRankingReconciler
from core.ranking.parsing import MalformedResponse
from core.ranking.reconciler import PLACEHOLDER_EXPLANATION
from core.ranking.repair import UNRANKED_REASON
from tests import FIXED_NOW
from tests.mocks.store_mocks import FakeMonotonicClock, InMemoryStore, ScriptedRankingProvider


@pytest.fixture
def ranking_store(qa_job):
    store = InMemoryStore()
    store.add_job(qa_job)
    for cid, name, total in [(1, "Ann", 60), (2, "Ben", 90), (3, "Cy", 75)]:
        store.add_candidate(Candidate(
            id=cid,
            name=name,
            years_experience=3,
            last_role_title="QA Engineer",
            skills=["Selenium"],
            created_at=FIXED_NOW,
        ))
        store.scores[(cid, 1)] = ScoreBreakdown(candidate_id=cid, job_id=1, total_score=total)
    return store


def _reconciler(store, provider=None, **kwargs):
    kwargs.setdefault('cache', ScoreCache(clock=FakeMonotonicClock()))
    return AIRankingReconciler(store, provider, **kwargs)


def _ranks(rankings):
    return [(r.candidate_id, r.rank) for r in rankings]


def _persisted(store, job_id=1):
    return {cid: (s.ai_rank, s.ai_rank_reason) for (cid, jid), s in store.scores.items() if jid == job_id}


class TestAIRanking:

    @pytest.mark.asyncio
    async def test_ai_ranking_is_repaired_and_persisted(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([
            {"candidateId": 3, "rank": 1, "reason": "Best automation depth"},
            {"candidateId": 1, "rank": 2, "reason": "Good fundamentals"},
            {"candidateId": 2, "rank": 3, "reason": "Less hands-on"},
        ])

        rankings = await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(3, 1), (1, 2), (2, 3)]
        assert _persisted(ranking_store)[3] == (1, "Best automation depth")
        assert _persisted(ranking_store)[2] == (3, "Less hands-on")

    @pytest.mark.asyncio
    async def test_summaries_are_sent_in_score_order(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 1, "rank": 1}])

        await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        job_summary, summaries = provider.requests[0]
        assert job_summary['title'] == "Senior QA Engineer"
        assert [s['id'] for s in summaries] == [2, 3, 1]
        assert [s['currentScore'] for s in summaries] == [90, 75, 60]

    @pytest.mark.asyncio
    async def test_partial_ranking_appends_remaining(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 1, "rank": 1, "reason": "x"}])

        rankings = await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(1, 1), (2, 2), (3, 3)]
        assert rankings[1].reason == UNRANKED_REASON

    @pytest.mark.asyncio
    async def test_unknown_ids_are_ignored(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([
            {"candidateId": 42, "rank": 1},
            {"candidateId": 2, "rank": 2},
        ])

        rankings = await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        assert sorted(r.candidate_id for r in rankings) == [1, 2, 3]
        assert rankings[0].candidate_id == 2

    @pytest.mark.asyncio
    async def test_inferred_role_is_flagged(self, ranking_store):
        ranking_store.candidates[1].last_role_title = "Not specified"
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 1, "rank": 1}])

        await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        summary = next(s for s in provider.requests[0][1] if s['id'] == 1)
        assert summary['roleIsInferred'] is True
        assert summary['lastRoleTitle'] == "QA Engineer"
        assert ranking_store.candidates[1].last_role_title == "Not specified"


class TestFallback:

    @pytest.mark.asyncio
    async def test_upstream_error_falls_back_to_score_order(self, ranking_store):
        provider = ScriptedRankingProvider(error=UpstreamUnavailableError("down"))

        rankings = await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(2, 1), (3, 2), (1, 3)]
        assert _persisted(ranking_store)[2] == (1, "Ranked based on algorithmic scoring: 90 points")

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 1, "rank": 1}])
        provider.delay = 1.0

        rankings = await _reconciler(ranking_store, provider, timeout_seconds=0.01).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(2, 1), (3, 2), (1, 3)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, "", "{not json", '{"rankings": []}', '{"rankings": [{"rank": 0}]}'])
    async def test_malformed_payload_falls_back(self, ranking_store, payload):
        provider = ScriptedRankingProvider(payload=payload)

        rankings = await _reconciler(ranking_store, provider).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(2, 1), (3, 2), (1, 3)]

    @pytest.mark.asyncio
    async def test_provider_reported_malformed_falls_back(self, ranking_store):
        provider = ScriptedRankingProvider(error=MalformedUpstreamResponseError("empty completion"))

        result = await _reconciler(ranking_store, provider).dispatch(ranking_store.jobs[1], [])

        assert isinstance(result, MalformedResponse)
        assert result.reason == "empty completion"

    @pytest.mark.asyncio
    async def test_no_provider_falls_back(self, ranking_store):
        rankings = await _reconciler(ranking_store, None).rank_candidates_for_job(1)

        assert _ranks(rankings) == [(2, 1), (3, 2), (1, 3)]
        assert all(rank is not None for rank, _ in _persisted(ranking_store).values())

    @pytest.mark.asyncio
    async def test_fallback_is_not_cached(self, ranking_store):
        provider = ScriptedRankingProvider(error=UpstreamUnavailableError("down"))
        reconciler = _reconciler(ranking_store, provider)

        await reconciler.rank_candidates_for_job(1)
        await reconciler.rank_candidates_for_job(1)

        assert len(provider.requests) == 2


class TestPersistence:

    @pytest.mark.asyncio
    async def test_placeholder_score_is_created(self, ranking_store):
        ranking_store.add_candidate(Candidate(id=4, name="Dee", skills=["Java"], created_at=FIXED_NOW))

        rankings = await _reconciler(ranking_store).rank_candidates_for_job(1)

        placeholder = ranking_store.scores[(4, 1)]
        assert placeholder.total_score == 0
        assert placeholder.explanation == PLACEHOLDER_EXPLANATION
        assert placeholder.ai_rank == 4
        assert rankings[-1].candidate_id == 4

    @pytest.mark.asyncio
    async def test_store_failure_raises_persistence_error(self, ranking_store):
        ranking_store.fail_writes = True

        with pytest.raises(PersistenceError):
            await _reconciler(ranking_store).rank_candidates_for_job(1)

    @pytest.mark.asyncio
    async def test_persist_false_leaves_store_untouched(self, ranking_store):
        await _reconciler(ranking_store).rank_candidates_for_job(1, persist=False)

        assert ranking_store.count('update_ai_ranking') == 0

    @pytest.mark.asyncio
    async def test_deterministic_fields_survive_ranking(self, ranking_store):
        await _reconciler(ranking_store).rank_candidates_for_job(1)

        assert ranking_store.scores[(2, 1)].total_score == 90


class TestEdgeCases:

    @pytest.mark.asyncio
    async def test_missing_job_raises(self, ranking_store):
        with pytest.raises(JobNotFoundError):
            await _reconciler(ranking_store).rank_candidates_for_job(999)

    @pytest.mark.asyncio
    async def test_no_candidates_returns_empty(self, qa_job):
        store = InMemoryStore()
        store.add_job(qa_job)
        provider = ScriptedRankingProvider.from_rankings([])

        assert await _reconciler(store, provider).rank_candidates_for_job(1) == []
        assert provider.requests == []


class TestRankingCache:

    @pytest.mark.asyncio
    async def test_successful_ranking_is_cached(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 3, "rank": 1}])
        reconciler = _reconciler(ranking_store, provider)

        first = await reconciler.rank_candidates_for_job(1)
        second = await reconciler.rank_candidates_for_job(1)

        assert len(provider.requests) == 1
        assert _ranks(first) == _ranks(second)
        assert ranking_store.count('update_ai_ranking') == 6

    @pytest.mark.asyncio
    async def test_use_cache_false_calls_again(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 3, "rank": 1}])
        reconciler = _reconciler(ranking_store, provider)

        await reconciler.rank_candidates_for_job(1)
        await reconciler.rank_candidates_for_job(1, use_cache=False)

        assert len(provider.requests) == 2

    @pytest.mark.asyncio
    async def test_changed_candidate_invalidates_cache(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 3, "rank": 1}])
        reconciler = _reconciler(ranking_store, provider)

        await reconciler.rank_candidates_for_job(1)
        ranking_store.candidates[2].skills.append("Java")
        await reconciler.rank_candidates_for_job(1)

        assert len(provider.requests) == 2

    @pytest.mark.asyncio
    async def test_clear_cache(self, ranking_store):
        provider = ScriptedRankingProvider.from_rankings([{"candidateId": 3, "rank": 1}])
        reconciler = _reconciler(ranking_store, provider)

        await reconciler.rank_candidates_for_job(1)
        assert reconciler.clear_cache(1) == 1
        await reconciler.rank_candidates_for_job(1)

        assert len(provider.requests) == 2


class TestScoreLoading:

    @pytest.mark.asyncio
    async def test_score_reads_are_bounded_by_batch_size(self, ranking_store):
        reconciler = _reconciler(ranking_store, batch_size=2)

        await reconciler.rank_candidates_for_job(1, persist=False)

        assert ranking_store.count('get_score') == 3
        assert ranking_store.max_in_flight['get_score'] == 2

    @pytest.mark.asyncio
    async def test_one_batch_reads_concurrently(self, ranking_store):
        await _reconciler(ranking_store, batch_size=10).rank_candidates_for_job(1, persist=False)

        assert ranking_store.max_in_flight['get_score'] == 3
