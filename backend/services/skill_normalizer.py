"""Resolve free-text skills against a dictionary snapshot.

Exact, case-insensitive, whitespace-trimmed lookup over canonical names and
variations. No stemming and no fuzzy distance: "postgress" stays unknown
until someone links it.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from models.schemas import SkillDictionary, TechLayer


@dataclass(frozen=True)
class Resolved:
    canonical_name: str
    category: TechLayer


@dataclass(frozen=True)
class Unknown:
    raw: str


def resolve(raw_skill: str, dictionary: SkillDictionary) -> Resolved | Unknown:
    skill = dictionary.lookup(raw_skill)
    if skill is None:
        return Unknown(raw=raw_skill.strip())
    return Resolved(canonical_name=skill.name, category=skill.category)


def resolve_many(raw_skills: Iterable[str], dictionary: SkillDictionary) -> list[Resolved | Unknown]:
    return [resolve(raw, dictionary) for raw in raw_skills]
