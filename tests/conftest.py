"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest

from core.config_loader import ScoringConfig
from core.models import Candidate, Job, JobSkill, ScoreWeights
from core.skills import SkillNormalizer
from tests import FIXED_NOW, fixed_clock, sqlite_url
from tests.mocks.store_mocks import InMemoryStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def scoring_config():
    return ScoringConfig()


@pytest.fixture
def normalizer():
    return SkillNormalizer()


@pytest.fixture
def default_weights():
    return ScoreWeights()


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def qa_job():
    return Job(
        id=1,
        title="Senior QA Engineer",
        description="Own test automation for the web platform",
        must=["Selenium", "Java"],
        nice=["Jenkins"],
    )


@pytest.fixture
def qa_job_skills():
    return [
        JobSkill("Selenium", required=True),
        JobSkill("Java", required=True),
        JobSkill("Jenkins", required=False),
    ]


@pytest.fixture
def strong_candidate():
    return Candidate(
        id=10,
        name="Alice Example",
        years_experience=6,
        last_role_title="Senior QA Engineer",
        skills=["Selenium WebDriver", "Java", "Jenkins"],
        experience_gaps=[],
        created_at=FIXED_NOW,
    )


@pytest.fixture
def store(qa_job, strong_candidate):
    """In-memory store seeded with one job and one candidate."""
    store = InMemoryStore()
    store.add_job(qa_job)
    store.add_candidate(strong_candidate)
    return store


@pytest.fixture
def sqlite_db_url(tmp_path):
    return sqlite_url(str(tmp_path))
