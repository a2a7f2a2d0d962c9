"""Skill usage statistics across JD specs and resumes."""

from datetime import datetime

from pydantic import BaseModel

from models.schemas.tech_layer import TechLayer


class SkillStatistic(BaseModel):
    skill_name: str
    category: TechLayer
    resolved: bool = True
    jd_count: int = 0
    resume_count: int = 0
    total_usage: int = 0
    variations: list[str] = []
    variation_usage_count: int = 0
    first_seen: datetime
    last_seen: datetime


class SkillUsageStatistics(BaseModel):
    statistics: list[SkillStatistic] = []
    total_skills: int = 0
    start: datetime | None = None
    end: datetime | None = None
    dictionary_version: str = ""
