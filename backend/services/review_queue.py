"""Human-in-the-loop review of skills the dictionary does not know yet.

An item is pending until it is approved (as a new canonical skill or as a
variation of an existing one) or rejected; either way it leaves the queue.
Decisions never touch JD specs that were already stored.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from models.schemas import ApprovalDecision, RejectionDecision, TechLayer, UnknownSkillItem
from services.errors import NotFoundError, ValidationError
from services.repositories import ReviewQueueRepository
from services.skill_dictionary import SkillDictionaryService, utcnow

logger = logging.getLogger(__name__)


class ReviewQueue:
    def __init__(
        self,
        repository: ReviewQueueRepository,
        dictionary: SkillDictionaryService,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repository = repository
        self._dictionary = dictionary
        self._clock = clock
        self._lock = threading.RLock()

    def record_unknown(self, name: str, source_id: str) -> UnknownSkillItem:
        """Count one more sighting of ``name`` coming from ``source_id``."""
        if not name or not name.strip():
            raise ValidationError("Unknown skill name must not be blank")
        name = name.strip()
        now = self._clock()
        with self._lock:
            existing = self._repository.get(name)
            if existing is None:
                item = UnknownSkillItem(
                    name=name,
                    frequency=1,
                    first_seen=now,
                    last_seen=now,
                    sources=(source_id,),
                )
            else:
                sources = existing.sources
                if source_id not in sources:
                    sources = sources + (source_id,)
                item = existing.model_copy(update={
                    "frequency": existing.frequency + 1,
                    "last_seen": now,
                    "sources": sources,
                })
            self._repository.save(item)
        logger.debug("Recorded unknown skill '%s' (frequency=%d)", item.name, item.frequency)
        return item

    def get(self, name: str) -> UnknownSkillItem:
        item = self._repository.get(name)
        if item is None:
            raise NotFoundError("Review queue item", name)
        return item

    def list_pending(self, sort_by: str = "frequency") -> list[UnknownSkillItem]:
        items = self._repository.list_all()
        if sort_by == "frequency":
            return sorted(items, key=lambda i: (-i.frequency, i.name.casefold()))
        if sort_by == "name":
            return sorted(items, key=lambda i: i.name.casefold())
        if sort_by == "last_seen":
            return sorted(items, key=lambda i: i.last_seen, reverse=True)
        raise ValidationError(f"Unknown sort key '{sort_by}'")

    def approve_as_canonical(self, name: str, category: TechLayer | str) -> ApprovalDecision:
        with self._lock:
            item = self.get(name)
            snapshot = self._dictionary.add_canonical_skill(item.name, category)
            self._repository.remove(item.name)
        skill = snapshot.get_skill(item.name)
        logger.info("Approved '%s' as canonical skill (%s)", item.name, skill.category.value)
        return ApprovalDecision(
            name=item.name,
            action="canonical",
            canonical_name=skill.name,
            category=skill.category,
            frequency=item.frequency,
            dictionary_version=snapshot.version,
            decided_at=self._clock(),
        )

    def approve_as_variation(self, name: str, canonical_name: str) -> ApprovalDecision:
        with self._lock:
            item = self.get(name)
            snapshot = self._dictionary.add_variation(item.name, canonical_name)
            self._repository.remove(item.name)
        skill = snapshot.lookup(item.name)
        logger.info("Approved '%s' as variation of '%s'", item.name, skill.name)
        return ApprovalDecision(
            name=item.name,
            action="variation",
            canonical_name=skill.name,
            category=skill.category,
            frequency=item.frequency,
            dictionary_version=snapshot.version,
            decided_at=self._clock(),
        )

    def reject(self, name: str, reason: str | None = None) -> RejectionDecision:
        with self._lock:
            item = self.get(name)
            self._repository.remove(item.name)
        logger.warning(
            "Rejected unknown skill '%s' (seen %d times): %s",
            item.name, item.frequency, reason or "no reason given",
        )
        return RejectionDecision(
            name=item.name,
            reason=reason,
            frequency=item.frequency,
            decided_at=self._clock(),
        )
