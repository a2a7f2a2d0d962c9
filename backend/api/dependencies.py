"""Shared dependencies for API routes."""

from services.engine import SkillEngine, get_engine as _get_engine


def get_engine() -> SkillEngine:
    return _get_engine()
