"""Wires the skill matching services together around shared repositories.

A process-wide engine is created lazily on first use, the same way the
API reaches every other singleton.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from config import Settings, settings
from services.jd_spec_builder import JDSpecBuilder
from services.match_rates import MatchRateService
from services.repositories import (
    BidRepository,
    DictionaryRepository,
    InMemoryBidRepository,
    InMemoryDictionaryRepository,
    InMemoryJDSpecRepository,
    InMemoryResumeRepository,
    InMemoryReviewQueueRepository,
    JDSpecRepository,
    ResumeRepository,
    ReviewQueueRepository,
)
from services.review_queue import ReviewQueue
from services.seed_dictionary import SEED_SKILLS
from services.skill_dictionary import SkillDictionaryService, utcnow
from services.skill_statistics import SkillStatisticsService

logger = logging.getLogger(__name__)


class SkillEngine:
    def __init__(
        self,
        config: Settings = settings,
        clock: Callable[[], datetime] = utcnow,
        dictionary_repository: DictionaryRepository | None = None,
        review_queue_repository: ReviewQueueRepository | None = None,
        jd_spec_repository: JDSpecRepository | None = None,
        resume_repository: ResumeRepository | None = None,
        bid_repository: BidRepository | None = None,
    ):
        self.dictionary_repository = dictionary_repository or InMemoryDictionaryRepository()
        self.review_queue_repository = review_queue_repository or InMemoryReviewQueueRepository()
        self.jd_spec_repository = jd_spec_repository or InMemoryJDSpecRepository()
        self.resume_repository = resume_repository or InMemoryResumeRepository()
        self.bid_repository = bid_repository or InMemoryBidRepository()

        self.dictionary = SkillDictionaryService(
            self.dictionary_repository,
            clock=clock,
            max_name_length=config.max_skill_name_length,
            initial_skills=SEED_SKILLS if config.seed_dictionary else None,
        )
        self.review_queue = ReviewQueue(self.review_queue_repository, self.dictionary, clock=clock)
        self.jd_specs = JDSpecBuilder(
            self.jd_spec_repository,
            self.dictionary,
            self.review_queue,
            clock=clock,
            tolerance=config.weight_tolerance,
            max_skill_name_length=config.max_skill_name_length,
        )
        self.match_rates = MatchRateService(
            self.jd_spec_repository, self.resume_repository, self.bid_repository
        )
        self.statistics = SkillStatisticsService(
            self.jd_spec_repository, self.resume_repository, self.dictionary
        )

        if config.dictionary_import_path:
            self._import_file(Path(config.dictionary_import_path))

    def _import_file(self, path: Path) -> None:
        data = json.loads(path.read_text(encoding="utf-8"))
        result = self.dictionary.import_version(data, mode="replace", allow_older_version=True)
        logger.info("Loaded dictionary export %s as v%s", path, result.version)


_engine: SkillEngine | None = None


def get_engine() -> SkillEngine:
    global _engine
    if _engine is None:
        _engine = SkillEngine()
    return _engine


def reset_engine() -> None:
    """Drop the process-wide engine. Useful for testing."""
    global _engine
    _engine = None
