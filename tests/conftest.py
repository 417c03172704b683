"""
Pytest configuration and shared fixtures for the challenge search tests.
"""
import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

import fakeredis


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def sample_challenge_dict() -> dict:
    """Sample challenge as handed over by the record store."""
    return {
        "challenge_id": "a0GK0000008OIRs",
        "name": "Build a Heroku Ruby App",
        "challenge_type": "Code",
        "platforms": ["Heroku"],
        "technologies": ["Ruby", "Postgres"],
        "total_prize_money": 1500,
        "participant_count": 12,
        "is_open": True,
        "community_name": "Appirio",
        "end_date": "2026-11-01T00:00:00",
    }


@pytest.fixture
def make_challenge(sample_challenge_dict):
    """Factory building Challenge models from the sample with overrides."""
    from challenge_search.models import Challenge

    def _make(**overrides) -> Challenge:
        data = dict(sample_challenge_dict)
        data.update(overrides)
        return Challenge.model_validate(data)

    return _make


# ============================================================================
# Fixtures: Store and Index
# ============================================================================

@pytest.fixture
def fake_redis():
    """Isolated in-memory Redis keyspace per test."""
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def test_settings():
    from config.settings import get_settings_for_testing
    return get_settings_for_testing()


@pytest.fixture
def keys(test_settings):
    from challenge_search.keys import KeyBuilder
    return KeyBuilder(test_settings.key_root)


@pytest.fixture
def index(fake_redis, test_settings):
    """ChallengeSearchIndex bound to the fake keyspace."""
    from challenge_search.service import ChallengeSearchIndex
    return ChallengeSearchIndex(fake_redis, settings=test_settings)


@pytest.fixture
def indexed(index, make_challenge):
    """Index pre-loaded with a small mixed catalogue."""
    challenges = [
        make_challenge(
            challenge_id="c1", name="Banana Stand", challenge_type="Code",
            platforms=["Heroku"], technologies=["Ruby"], total_prize_money=500,
            participant_count=3, is_open=True, community_name=None,
            end_date="2026-12-01",
        ),
        make_challenge(
            challenge_id="c2", name="Apple Picker", challenge_type="Design",
            platforms=["AWS"], technologies=["Java"], total_prize_money=1500,
            participant_count=10, is_open=False, community_name="Appirio",
            end_date="2026-11-01",
        ),
        make_challenge(
            challenge_id="c3", name="Cherry Cloud", challenge_type="Code",
            platforms=["Heroku", "AWS"], technologies=["Python"], total_prize_money=3000,
            participant_count=25, is_open=True, community_name="Appirio",
            end_date="2027-01-15",
        ),
    ]
    for challenge in challenges:
        index.upsert(challenge)
    return index


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")

