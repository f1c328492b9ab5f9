"""
Tests for parsing untrusted ranking payloads into tagged results.
"""
import json

import pytest

from core.ranking.parsing import (
    DEFAULT_AI_REASON,
    MalformedResponse,
    RankingOk,
    parse_ranking_payload,
)


class TestParseRankingPayload:

    def test_valid_json_text(self):
        payload = json.dumps({"rankings": [
            {"candidateId": 3, "rank": 1, "reason": "Strong Selenium"},
            {"candidateId": 1, "rank": 2, "reason": "Solid Java"},
        ]})

        result = parse_ranking_payload(payload)

        assert isinstance(result, RankingOk)
        assert [(e.candidate_id, e.rank) for e in result.entries] == [(3, 1), (1, 2)]
        assert result.entries[0].reason == "Strong Selenium"

    def test_decoded_object_is_accepted(self):
        result = parse_ranking_payload({"rankings": [{"candidateId": 3, "rank": 1, "reason": "ok"}]})
        assert isinstance(result, RankingOk)

    @pytest.mark.parametrize("payload", [
        None,
        "",
        "   ",
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"ranking": []}),
        json.dumps({"rankings": "first"}),
        json.dumps({"rankings": []}),
    ])
    def test_malformed_payloads(self, payload):
        result = parse_ranking_payload(payload)

        assert isinstance(result, MalformedResponse)
        assert result.reason

    def test_invalid_entries_are_dropped(self):
        result = parse_ranking_payload({"rankings": [
            {"candidateId": 1, "rank": 0},
            {"candidateId": 2, "rank": 1.5},
            {"candidateId": 3, "rank": "first"},
            {"rank": 1},
            {"candidateId": 4, "rank": True},
            {"candidateId": True, "rank": 3},
            {"candidateId": False, "rank": 4},
            "garbage",
            {"candidateId": 5, "rank": 2, "reason": "kept"},
        ]})

        assert isinstance(result, RankingOk)
        assert [(e.candidate_id, e.rank) for e in result.entries] == [(5, 2)]

    def test_all_entries_invalid_is_malformed(self):
        result = parse_ranking_payload({"rankings": [{"candidateId": 1, "rank": -1}]})
        assert isinstance(result, MalformedResponse)

    def test_lenient_numeric_forms(self):
        result = parse_ranking_payload({"rankings": [
            {"candidateId": "7", "rank": "2"},
            {"candidateId": 8, "rank": 1.0},
        ]})

        assert [(e.candidate_id, e.rank) for e in result.entries] == [("7", 2), (8, 1)]

    def test_missing_or_blank_reason_gets_default(self):
        result = parse_ranking_payload({"rankings": [
            {"candidateId": 1, "rank": 1},
            {"candidateId": 2, "rank": 2, "reason": "  "},
            {"candidateId": 3, "rank": 3, "reason": None},
        ]})

        assert all(e.reason == DEFAULT_AI_REASON for e in result.entries)

    def test_extra_fields_are_ignored(self):
        result = parse_ranking_payload({"rankings": [
            {"candidateId": 1, "rank": 1, "reason": "x", "scores": {"technical": 30}},
        ]})
        assert isinstance(result, RankingOk)

    def test_boolean_candidate_id_does_not_claim_a_slot(self):
        result = parse_ranking_payload('{"rankings": [{"candidateId": true, "rank": 1}, {"candidateId": 2, "rank": 2}]}')

        assert isinstance(result, RankingOk)
        assert [(e.candidate_id, e.rank) for e in result.entries] == [(2, 2)]
