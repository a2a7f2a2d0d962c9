"""Review queue items and the decisions taken on them."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from models.schemas.tech_layer import TechLayer


class UnknownSkillItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str  # first-seen spelling
    frequency: int = 1
    first_seen: datetime
    last_seen: datetime
    sources: tuple[str, ...] = ()  # JD spec ids, no duplicates


class ApprovalDecision(BaseModel):
    name: str
    action: Literal["canonical", "variation"]
    canonical_name: str
    category: TechLayer
    frequency: int
    dictionary_version: str
    decided_at: datetime


class RejectionDecision(BaseModel):
    name: str
    reason: str | None = None
    frequency: int
    decided_at: datetime
