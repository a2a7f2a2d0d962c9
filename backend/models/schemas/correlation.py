"""Correlation scores between weighted skill sets."""

from pydantic import BaseModel

from models.schemas.tech_layer import TechLayer


class LayerCorrelationResult(BaseModel):
    layer: TechLayer
    score: float = 0.0  # 0.0-1.0
    weight: float = 0.0
    matching_skills: list[str] = []
    missing_skills: list[str] = []  # present on the current side only


class CorrelationResult(BaseModel):
    overall_score: float = 0.0  # 0.0-1.0
    layer_breakdown: list[LayerCorrelationResult] = []
    dictionary_version: str = ""


class ResumeMatchRate(BaseModel):
    resume_id: str
    company: str
    role: str
    jd_spec_id: str | None = None
    match_rate: float = 0.0
    match_rate_percentage: int = 0
    layer_breakdown: list[LayerCorrelationResult] = []


class BidMatchRateResult(BaseModel):
    bid_id: str
    company: str
    role: str
    match_rate: float = 0.0
    match_rate_percentage: int = 0
    layer_breakdown: list[LayerCorrelationResult] = []
