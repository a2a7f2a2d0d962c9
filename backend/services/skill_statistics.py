"""Skill usage statistics across stored JD specs and resumes."""

import logging
from datetime import datetime, timezone

from models.schemas import (
    LayerSkills,
    SkillDictionary,
    SkillStatistic,
    SkillUsageStatistics,
    TechLayer,
    normalize_key,
)
from services.errors import ValidationError
from services.repositories import JDSpecRepository, ResumeRepository
from services.skill_dictionary import SkillDictionaryService

logger = logging.getLogger(__name__)


class _Usage:
    def __init__(self, name: str, category: TechLayer, resolved: bool, seen: datetime):
        self.name = name
        self.category = category
        self.resolved = resolved
        self.jd_sources: set[str] = set()
        self.resume_sources: set[str] = set()
        self.variations: dict[str, str] = {}
        self.variation_usage = 0
        self.first_seen = seen
        self.last_seen = seen

    def touch(self, seen: datetime) -> None:
        self.first_seen = min(self.first_seen, seen)
        self.last_seen = max(self.last_seen, seen)

    def to_statistic(self) -> SkillStatistic:
        jd_count = len(self.jd_sources)
        resume_count = len(self.resume_sources)
        return SkillStatistic(
            skill_name=self.name,
            category=self.category,
            resolved=self.resolved,
            jd_count=jd_count,
            resume_count=resume_count,
            total_usage=jd_count + resume_count,
            variations=sorted(self.variations.values(), key=str.casefold),
            variation_usage_count=self.variation_usage,
            first_seen=self.first_seen,
            last_seen=self.last_seen,
        )


class SkillStatisticsService:
    def __init__(
        self,
        jd_specs: JDSpecRepository,
        resumes: ResumeRepository,
        dictionary: SkillDictionaryService,
    ):
        self._jd_specs = jd_specs
        self._resumes = resumes
        self._dictionary = dictionary

    def usage(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        category: TechLayer | str | None = None,
        sort_by: str = "frequency",
        sort_order: str | None = None,
    ) -> SkillUsageStatistics:
        """Count usage per skill, resolving stored entries against the current dictionary.

        Entries that were unknown when stored but have since been approved are
        counted under their canonical skill, as a variation usage.
        """
        start, end = _as_utc(start), _as_utc(end)
        if sort_by not in ("frequency", "name"):
            raise ValidationError(f"Unknown sort key '{sort_by}'")
        if sort_order not in (None, "asc", "desc"):
            raise ValidationError(f"Unknown sort order '{sort_order}'")
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        if category is not None:
            try:
                category = TechLayer(category)
            except ValueError as exc:
                raise ValidationError(f"Unknown layer '{category}'") from exc

        snapshot = self._dictionary.current()
        usage: dict[str, _Usage] = {}

        for spec in self._jd_specs.list_all():
            if _in_range(spec.created_at, start, end):
                self._count(usage, snapshot, spec.skills, spec.created_at, spec.id, "jd")
        for resume in self._resumes.list_all():
            if resume.skills is not None and _in_range(resume.created_at, start, end):
                self._count(usage, snapshot, resume.skills, resume.created_at, resume.id, "resume")

        statistics = [u.to_statistic() for u in usage.values()]
        if category is not None:
            statistics = [s for s in statistics if s.category == category]

        if sort_by == "name":
            statistics.sort(key=lambda s: s.skill_name.casefold(), reverse=sort_order == "desc")
        else:
            statistics.sort(key=lambda s: s.skill_name.casefold())
            statistics.sort(key=lambda s: s.total_usage, reverse=sort_order != "asc")

        logger.info("Computed usage statistics for %d skills", len(statistics))
        return SkillUsageStatistics(
            statistics=statistics,
            total_skills=len(statistics),
            start=start,
            end=end,
            dictionary_version=snapshot.version,
        )

    @staticmethod
    def _count(
        usage: dict[str, _Usage],
        snapshot: SkillDictionary,
        skills: LayerSkills,
        seen: datetime,
        source_id: str,
        source: str,
    ) -> None:
        for layer, entries in skills.items():
            for entry in entries:
                skill = snapshot.lookup(entry.skill)
                if skill is not None:
                    key = "canonical:" + skill.key
                    if key not in usage:
                        usage[key] = _Usage(skill.name, skill.category, True, seen)
                    item = usage[key]
                    if normalize_key(entry.skill) != skill.key:
                        item.variations.setdefault(normalize_key(entry.skill), entry.skill)
                        item.variation_usage += 1
                else:
                    key = "unresolved:" + entry.skill
                    if key not in usage:
                        usage[key] = _Usage(entry.skill, layer, False, seen)
                    item = usage[key]
                item.touch(seen)
                if source == "jd":
                    item.jd_sources.add(source_id)
                else:
                    item.resume_sources.add(source_id)


def _as_utc(moment: datetime | None) -> datetime | None:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _in_range(moment: datetime, start: datetime | None, end: datetime | None) -> bool:
    if start is not None and moment < start:
        return False
    if end is not None and moment > end:
        return False
    return True
