"""Canonical skill dictionary snapshots and their export document."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, PrivateAttr

from models.schemas.tech_layer import TechLayer


def normalize_key(text: str) -> str:
    """Identity key for skill text: trimmed and case-folded."""
    return text.strip().casefold()


class CanonicalSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str  # keeps the casing it was registered with
    category: TechLayer
    variations: tuple[str, ...] = ()
    created_at: datetime

    @property
    def key(self) -> str:
        return normalize_key(self.name)


class SkillDictionary(BaseModel):
    """Immutable, versioned snapshot of the canonical vocabulary.

    Lookups go through an index of canonical names and variations that is
    built once when the snapshot is constructed.
    """
    model_config = ConfigDict(frozen=True)

    version: str
    skills: tuple[CanonicalSkill, ...] = ()
    created_at: datetime
    updated_at: datetime

    _index: dict[str, CanonicalSkill] = PrivateAttr(default_factory=dict)
    _canonical: dict[str, CanonicalSkill] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        index: dict[str, CanonicalSkill] = {}
        canonical: dict[str, CanonicalSkill] = {}
        for skill in self.skills:
            canonical[skill.key] = skill
            index[skill.key] = skill
            for variation in skill.variations:
                index.setdefault(normalize_key(variation), skill)
        self._index = index
        self._canonical = canonical

    def lookup(self, text: str) -> CanonicalSkill | None:
        """Find the skill a canonical name or variation resolves to."""
        return self._index.get(normalize_key(text))

    def get_skill(self, name: str) -> CanonicalSkill | None:
        """Find a skill by canonical name only."""
        return self._canonical.get(normalize_key(name))

    def has_term(self, text: str) -> bool:
        return normalize_key(text) in self._index

    def skills_in(self, category: TechLayer) -> list[CanonicalSkill]:
        return [s for s in self.skills if s.category == TechLayer(category)]

    def variations_of(self, name: str) -> list[str]:
        skill = self.get_skill(name)
        return list(skill.variations) if skill else []


class ExportedSkill(BaseModel):
    name: str
    category: TechLayer
    variations: list[str] = []
    created_at: datetime | None = None


class DictionaryExport(BaseModel):
    """Portable JSON document for moving a dictionary between installs."""
    version: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    exported_at: datetime | None = None
    skills: list[ExportedSkill] = []


class ImportResult(BaseModel):
    mode: Literal["replace", "merge"]
    previous_version: str
    version: str
    skills_added: int = 0
    variations_added: int = 0
    conflicts: list[str] = []
