"""Pydantic records shared by the skill matching services and the API."""

from models.schemas.correlation import (
    BidMatchRateResult,
    CorrelationResult,
    LayerCorrelationResult,
    ResumeMatchRate,
)
from models.schemas.dictionary import (
    CanonicalSkill,
    DictionaryExport,
    ExportedSkill,
    ImportResult,
    SkillDictionary,
    normalize_key,
)
from models.schemas.jd_spec import CanonicalJDSpec, CreateJDSpecResult, UpdateJDSpecResult
from models.schemas.records import BidRecord, ResumeRecord
from models.schemas.review_queue import ApprovalDecision, RejectionDecision, UnknownSkillItem
from models.schemas.statistics import SkillStatistic, SkillUsageStatistics
from models.schemas.tech_layer import LayerSkills, LayerWeights, SkillEntry, SkillWeight, TechLayer

__all__ = [
    "ApprovalDecision",
    "BidMatchRateResult",
    "BidRecord",
    "CanonicalJDSpec",
    "CanonicalSkill",
    "CorrelationResult",
    "CreateJDSpecResult",
    "DictionaryExport",
    "ExportedSkill",
    "ImportResult",
    "LayerCorrelationResult",
    "LayerSkills",
    "LayerWeights",
    "RejectionDecision",
    "ResumeMatchRate",
    "ResumeRecord",
    "SkillDictionary",
    "SkillEntry",
    "SkillStatistic",
    "SkillUsageStatistics",
    "SkillWeight",
    "TechLayer",
    "UnknownSkillItem",
    "UpdateJDSpecResult",
    "normalize_key",
]
