"""Shared test configuration, fixtures and pytest markers."""

from datetime import datetime, timedelta, timezone

import pytest

from config import Settings
from services.engine import SkillEngine

FIXED_NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "concurrency: spins up threads against a shared service"
    )


class FakeClock:
    """Deterministic clock; advance it explicitly."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(seed_dictionary=False, dictionary_import_path="")


@pytest.fixture
def empty_engine(clock, test_settings):
    return SkillEngine(config=test_settings, clock=clock)


@pytest.fixture
def engine(empty_engine):
    """Engine with a small vocabulary: React{React.js}, Vue, Node.js, PostgreSQL{postgres}."""
    d = empty_engine.dictionary
    d.add_canonical_skill("React", "frontend")
    d.add_variation("React.js", "React")
    d.add_canonical_skill("Vue", "frontend")
    d.add_canonical_skill("Node.js", "backend")
    d.add_canonical_skill("PostgreSQL", "database")
    d.add_variation("postgres", "PostgreSQL")
    return empty_engine
