from typing import Literal

from pydantic import BaseModel, Field

from models.schemas import LayerWeights, SkillWeight, TechLayer


class AddSkillRequest(BaseModel):
    name: str = Field(..., description="Canonical skill name")
    category: TechLayer


class UpdateSkillRequest(BaseModel):
    new_name: str | None = None
    category: TechLayer | None = None


class AddVariationRequest(BaseModel):
    variation: str
    canonical_name: str


class ImportDictionaryRequest(BaseModel):
    data: dict = Field(..., description="Document produced by /dictionary/export")
    mode: Literal["replace", "merge"] = "merge"
    allow_older_version: bool = False


class NormalizeRequest(BaseModel):
    skills: list[str] = Field(..., max_length=500)


class JDSpecRequest(BaseModel):
    role: str = Field(..., max_length=200)
    layer_weights: LayerWeights
    skills: dict[TechLayer, list[SkillWeight]] = {}


class ApproveRequest(BaseModel):
    action: Literal["canonical", "variation"]
    category: TechLayer | None = None  # required for canonical
    canonical_name: str | None = None  # required for variation


class RejectRequest(BaseModel):
    reason: str | None = Field(None, max_length=1000)
