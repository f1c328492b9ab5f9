"""
Tests for candidate summaries and role-title inference.
"""
import pytest

from core.models import Candidate, EmploymentGap, Job, ScoreBreakdown
from core.ranking.summaries import (
    DEFAULT_INFERRED_ROLE,
    build_candidate_summary,
    build_job_summary,
    has_role_title,
    infer_role_title,
    ranking_input_fingerprint,
)


def _candidate(**overrides):
    data = dict(id=1, name="Dana Smith", last_role_title=None, skills=[])
    data.update(overrides)
    return Candidate(**data)


class TestInferRoleTitle:

    def test_parsed_title_is_not_inferred(self):
        assert infer_role_title(_candidate(last_role_title="Data Engineer")) == ("Data Engineer", False)

    @pytest.mark.parametrize("title", [None, "", "  ", "null", "None", "Not Specified"])
    def test_placeholder_titles_count_as_missing(self, title):
        assert not has_role_title(title)
        _, inferred = infer_role_title(_candidate(last_role_title=title))
        assert inferred

    @pytest.mark.parametrize("name,expected", [
        ("QA Lead Jordan", "QA/Test Engineer"),
        ("Sam (SDET)", "SDET"),
        ("Senior Pat", "Senior Engineer"),
    ])
    def test_name_hints(self, name, expected):
        assert infer_role_title(_candidate(name=name)) == (expected, True)

    @pytest.mark.parametrize("skills,expected", [
        (["Selenium", "Cucumber"], "QA Engineer"),
        (["Python", "Django"], "Software Engineer"),
        (["Excel"], DEFAULT_INFERRED_ROLE),
    ])
    def test_skill_hints(self, skills, expected):
        assert infer_role_title(_candidate(skills=skills)) == (expected, True)

    def test_inference_does_not_modify_candidate(self):
        candidate = _candidate(skills=["Python"])
        infer_role_title(candidate)

        assert candidate.last_role_title is None


class TestBuildSummaries:

    @pytest.fixture
    def job(self):
        return Job(id=1, title="QA Engineer", must=["Selenium", "Java"], nice=["Jenkins"])

    def test_job_summary(self, job):
        assert build_job_summary(job) == {
            'id': 1, 'title': "QA Engineer", 'must': ["Selenium", "Java"], 'nice': ["Jenkins"],
        }

    def test_candidate_summary_with_score(self, job, normalizer):
        candidate = _candidate(
            years_experience=4,
            last_role_title="QA Analyst",
            skills=["Selenium", "Jenkins"],
            experience_gaps=[EmploymentGap(months=3)],
        )
        score = ScoreBreakdown(candidate_id=1, job_id=1, total_score=71, missing_must_have=["Java"])

        summary = build_candidate_summary(candidate, job, score, normalizer)

        assert summary['lastRoleTitle'] == "QA Analyst"
        assert summary['roleIsInferred'] is False
        assert summary['yearsExperience'] == 4
        assert summary['skillCount'] == 2
        assert summary['skillMatchPercentage'] == 65
        assert summary['currentScore'] == 71
        assert summary['missingMustHave'] == ["Java"]
        assert summary['experienceGaps'] == 1

    def test_candidate_summary_without_score(self, job, normalizer):
        summary = build_candidate_summary(_candidate(skills=["Java"]), job, None, normalizer)

        assert summary['currentScore'] == 0
        assert summary['yearsExperience'] == 0
        assert summary['missingMustHave'] == ["Selenium"]
        assert summary['lastRoleTitle'] == "Software Engineer"
        assert summary['roleIsInferred'] is True


class TestRankingFingerprint:

    def test_ignores_candidate_order(self):
        job = Job(id=1, title="QA")
        a, b = _candidate(id=1), _candidate(id=2, name="Eli")

        assert ranking_input_fingerprint(job, [a, b]) == ranking_input_fingerprint(job, [b, a])

    def test_changes_with_candidate_skills(self):
        job = Job(id=1, title="QA")

        before = ranking_input_fingerprint(job, [_candidate(skills=["Java"])])
        after = ranking_input_fingerprint(job, [_candidate(skills=["Java", "Go"])])

        assert before != after
