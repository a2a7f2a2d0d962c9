"""Persistence interfaces and their in-memory implementations.

The storage engine is outside this service; anything implementing these
interfaces can be handed to the engine container.
"""

import threading
from abc import ABC, abstractmethod

from models.schemas import (
    BidRecord,
    CanonicalJDSpec,
    ResumeRecord,
    SkillDictionary,
    UnknownSkillItem,
    normalize_key,
)


class DictionaryRepository(ABC):
    """Stores published snapshots. Publishing moves the current pointer."""

    @abstractmethod
    def get_current(self) -> SkillDictionary | None: ...

    @abstractmethod
    def get_version(self, version: str) -> SkillDictionary | None: ...

    @abstractmethod
    def list_versions(self) -> list[str]: ...

    @abstractmethod
    def publish(self, snapshot: SkillDictionary) -> None:
        """Store a new snapshot and make it current. Versions are never overwritten."""


class ReviewQueueRepository(ABC):
    """Pending unknown skills keyed case-insensitively by name."""

    @abstractmethod
    def get(self, name: str) -> UnknownSkillItem | None: ...

    @abstractmethod
    def save(self, item: UnknownSkillItem) -> None: ...

    @abstractmethod
    def remove(self, name: str) -> None: ...

    @abstractmethod
    def list_all(self) -> list[UnknownSkillItem]: ...


class JDSpecRepository(ABC):
    @abstractmethod
    def get(self, spec_id: str) -> CanonicalJDSpec | None: ...

    @abstractmethod
    def save(self, spec: CanonicalJDSpec) -> None: ...

    @abstractmethod
    def delete(self, spec_id: str) -> bool: ...

    @abstractmethod
    def list_all(self) -> list[CanonicalJDSpec]: ...


class ResumeRepository(ABC):
    @abstractmethod
    def get(self, resume_id: str) -> ResumeRecord | None: ...

    @abstractmethod
    def save(self, resume: ResumeRecord) -> None: ...

    @abstractmethod
    def list_all(self) -> list[ResumeRecord]: ...


class BidRepository(ABC):
    @abstractmethod
    def get(self, bid_id: str) -> BidRecord | None: ...

    @abstractmethod
    def save(self, bid: BidRecord) -> None: ...

    @abstractmethod
    def list_all(self) -> list[BidRecord]: ...


class InMemoryDictionaryRepository(DictionaryRepository):
    """Keeps every published snapshot; the last one published is current."""

    def __init__(self):
        self._versions: dict[str, SkillDictionary] = {}
        self._current: str | None = None
        self._lock = threading.Lock()

    def get_current(self) -> SkillDictionary | None:
        with self._lock:
            return self._versions.get(self._current) if self._current else None

    def get_version(self, version: str) -> SkillDictionary | None:
        return self._versions.get(version)

    def list_versions(self) -> list[str]:
        return list(self._versions)

    def publish(self, snapshot: SkillDictionary) -> None:
        with self._lock:
            if snapshot.version in self._versions:
                raise ValueError(f"Dictionary version {snapshot.version} already published")
            self._versions[snapshot.version] = snapshot
            self._current = snapshot.version


class InMemoryReviewQueueRepository(ReviewQueueRepository):
    def __init__(self):
        self._items: dict[str, UnknownSkillItem] = {}

    def get(self, name: str) -> UnknownSkillItem | None:
        return self._items.get(normalize_key(name))

    def save(self, item: UnknownSkillItem) -> None:
        self._items[normalize_key(item.name)] = item

    def remove(self, name: str) -> None:
        self._items.pop(normalize_key(name), None)

    def list_all(self) -> list[UnknownSkillItem]:
        return list(self._items.values())


class InMemoryJDSpecRepository(JDSpecRepository):
    def __init__(self):
        self._specs: dict[str, CanonicalJDSpec] = {}

    def get(self, spec_id: str) -> CanonicalJDSpec | None:
        return self._specs.get(spec_id)

    def save(self, spec: CanonicalJDSpec) -> None:
        self._specs[spec.id] = spec

    def delete(self, spec_id: str) -> bool:
        return self._specs.pop(spec_id, None) is not None

    def list_all(self) -> list[CanonicalJDSpec]:
        return list(self._specs.values())


class InMemoryResumeRepository(ResumeRepository):
    def __init__(self):
        self._resumes: dict[str, ResumeRecord] = {}

    def get(self, resume_id: str) -> ResumeRecord | None:
        return self._resumes.get(resume_id)

    def save(self, resume: ResumeRecord) -> None:
        self._resumes[resume.id] = resume

    def list_all(self) -> list[ResumeRecord]:
        return list(self._resumes.values())


class InMemoryBidRepository(BidRepository):
    def __init__(self):
        self._bids: dict[str, BidRecord] = {}

    def get(self, bid_id: str) -> BidRecord | None:
        return self._bids.get(bid_id)

    def save(self, bid: BidRecord) -> None:
        self._bids[bid.id] = bid

    def list_all(self) -> list[BidRecord]:
        return list(self._bids.values())
