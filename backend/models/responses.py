from pydantic import BaseModel

from models.schemas import CanonicalSkill, TechLayer


class HealthResponse(BaseModel):
    status: str = "ok"
    dictionary_version: str = ""


class DictionaryResponse(BaseModel):
    version: str
    skill_count: int = 0
    skills: list[CanonicalSkill] = []


class DictionaryMutationResponse(BaseModel):
    """Result of a dictionary write: the new current version and the affected skill."""
    version: str
    skill: CanonicalSkill | None = None


class VersionsResponse(BaseModel):
    current: str
    versions: list[str] = []


class VariationsResponse(BaseModel):
    skill: str
    variations: list[str] = []


class NormalizedSkill(BaseModel):
    raw: str
    resolved: bool = False
    canonical_name: str | None = None
    category: TechLayer | None = None


class NormalizeResponse(BaseModel):
    dictionary_version: str
    skills: list[NormalizedSkill] = []
