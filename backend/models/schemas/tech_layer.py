"""Technology layers and the weighted skill shapes attached to them."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class TechLayer(str, Enum):
    """Closed set of layers. Declaration order is the canonical iteration order."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    CLOUD = "cloud"
    DEVOPS = "devops"
    OTHERS = "others"


class LayerWeights(BaseModel):
    """Importance of each layer for a role.

    The sum-to-one invariant is enforced by the JD spec builder, not here,
    so callers get the engine's own weight-sum errors.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    frontend: float = 0.0
    backend: float = 0.0
    database: float = 0.0
    cloud: float = 0.0
    devops: float = 0.0
    others: float = 0.0

    def get(self, layer: TechLayer) -> float:
        return getattr(self, TechLayer(layer).value)

    def total(self) -> float:
        return sum(self.get(layer) for layer in TechLayer)


class SkillWeight(BaseModel):
    """A raw skill as supplied by a caller, before normalization."""
    skill: str
    weight: float


class SkillEntry(BaseModel):
    """A stored skill: either resolved to a canonical name or kept as raw text."""
    model_config = ConfigDict(frozen=True)

    skill: str
    weight: float  # 0.0-1.0 share of the layer
    kind: Literal["canonical", "unresolved"] = "canonical"

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for matching. Unresolved text never equals a canonical name."""
        if self.kind == "canonical":
            return (self.kind, self.skill.strip().casefold())
        return (self.kind, self.skill)


class LayerSkills(BaseModel):
    """Normalized skills grouped by layer."""
    model_config = ConfigDict(frozen=True)

    frontend: tuple[SkillEntry, ...] = ()
    backend: tuple[SkillEntry, ...] = ()
    database: tuple[SkillEntry, ...] = ()
    cloud: tuple[SkillEntry, ...] = ()
    devops: tuple[SkillEntry, ...] = ()
    others: tuple[SkillEntry, ...] = ()

    def get(self, layer: TechLayer) -> tuple[SkillEntry, ...]:
        return getattr(self, TechLayer(layer).value)

    def items(self) -> list[tuple[TechLayer, tuple[SkillEntry, ...]]]:
        return [(layer, self.get(layer)) for layer in TechLayer]

    def all_entries(self) -> list[SkillEntry]:
        return [entry for _, entries in self.items() for entry in entries]
