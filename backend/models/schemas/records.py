"""Resume and bid records the match-rate services read."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.schemas.tech_layer import LayerSkills, LayerWeights


class ResumeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    company: str
    role: str
    skills: LayerSkills | None = None
    jd_spec_id: str | None = None  # JD the resume was tailored for
    created_at: datetime


class BidRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    company: str
    role: str
    layer_weights: LayerWeights
    skills: LayerSkills
    created_at: datetime
