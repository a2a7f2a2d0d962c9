from datetime import timedelta

import pytest

from models.schemas import LayerSkills, ResumeRecord, SkillEntry, TechLayer
from services.errors import ValidationError


@pytest.fixture
def populated(engine, clock):
    builder = engine.jd_specs
    builder.create("A", {"frontend": 1.0}, {"frontend": [("React", 0.5), ("VueJS", 0.5)]})
    clock.advance(days=1)
    builder.create("B", {"frontend": 0.5, "database": 0.5}, {
        "frontend": [("react.js", 1.0)],
        "database": [("postgres", 1.0)],
    })
    clock.advance(days=1)
    engine.resume_repository.save(ResumeRecord(
        id="r1", company="Acme", role="Engineer", created_at=clock(),
        skills=LayerSkills(frontend=(SkillEntry(skill="React", weight=1.0),)),
    ))
    return engine


def by_name(stats):
    return {s.skill_name: s for s in stats.statistics}


def test_counts_jd_and_resume_usage(populated, clock):
    stats = by_name(populated.statistics.usage())

    react = stats["React"]
    assert react.jd_count == 2
    assert react.resume_count == 1
    assert react.total_usage == 3
    assert react.first_seen == clock() - timedelta(days=2)
    assert react.last_seen == clock()
    assert stats["PostgreSQL"].category == TechLayer.DATABASE


def test_unresolved_entries_reported_by_raw_text(populated):
    vue = by_name(populated.statistics.usage())["VueJS"]
    assert vue.resolved is False
    assert vue.category == TechLayer.FRONTEND


def test_approved_unknowns_count_as_variations(populated):
    populated.review_queue.approve_as_variation("VueJS", "Vue")
    vue = by_name(populated.statistics.usage())["Vue"]
    assert vue.resolved is True
    assert vue.variations == ["VueJS"]
    assert vue.variation_usage_count == 1


def test_sorted_by_frequency_then_name(populated):
    names = [s.skill_name for s in populated.statistics.usage().statistics]
    assert names[0] == "React"
    assert names[1:] == sorted(names[1:], key=str.casefold)


def test_sort_by_name(populated):
    names = [s.skill_name for s in populated.statistics.usage(sort_by="name").statistics]
    assert names == ["PostgreSQL", "React", "VueJS"]
    desc = [s.skill_name for s in populated.statistics.usage(sort_by="name", sort_order="desc").statistics]
    assert desc == list(reversed(names))


def test_category_filter(populated):
    stats = populated.statistics.usage(category="database")
    assert [s.skill_name for s in stats.statistics] == ["PostgreSQL"]
    assert stats.total_skills == 1


def test_date_range_filter(populated, clock):
    start = clock() - timedelta(days=1, hours=1)
    stats = by_name(populated.statistics.usage(start=start))
    assert stats["React"].jd_count == 1
    assert "VueJS" not in stats


def test_naive_dates_are_treated_as_utc(populated, clock):
    end = (clock() - timedelta(days=1, hours=12)).replace(tzinfo=None)
    stats = by_name(populated.statistics.usage(end=end))
    assert set(stats) == {"React", "VueJS"}


def test_rejects_bad_arguments(populated, clock):
    with pytest.raises(ValidationError):
        populated.statistics.usage(sort_by="popularity")
    with pytest.raises(ValidationError):
        populated.statistics.usage(start=clock(), end=clock() - timedelta(days=1))
