from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_engine
from config import settings
from models.requests import (
    AddSkillRequest,
    AddVariationRequest,
    ApproveRequest,
    ImportDictionaryRequest,
    JDSpecRequest,
    NormalizeRequest,
    RejectRequest,
    UpdateSkillRequest,
)
from models.responses import (
    DictionaryMutationResponse,
    DictionaryResponse,
    HealthResponse,
    NormalizedSkill,
    NormalizeResponse,
    VariationsResponse,
    VersionsResponse,
)
from models.schemas import (
    ApprovalDecision,
    BidMatchRateResult,
    CanonicalJDSpec,
    CanonicalSkill,
    CorrelationResult,
    CreateJDSpecResult,
    DictionaryExport,
    ImportResult,
    RejectionDecision,
    ResumeMatchRate,
    SkillDictionary,
    SkillUsageStatistics,
    TechLayer,
    UnknownSkillItem,
    UpdateJDSpecResult,
)
from services.engine import SkillEngine
from services.skill_normalizer import Resolved, resolve_many

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _dictionary_response(snapshot: SkillDictionary) -> DictionaryResponse:
    return DictionaryResponse(
        version=snapshot.version,
        skill_count=len(snapshot.skills),
        skills=list(snapshot.skills),
    )


@router.get("/health", response_model=HealthResponse)
async def health(engine: SkillEngine = Depends(get_engine)):
    return HealthResponse(status="ok", dictionary_version=engine.dictionary.current().version)


# ---------------------------------------------------------------------------
# Dictionary
# ---------------------------------------------------------------------------

@router.get("/dictionary", response_model=DictionaryResponse)
async def current_dictionary(engine: SkillEngine = Depends(get_engine)):
    return _dictionary_response(engine.dictionary.current())


@router.get("/dictionary/versions", response_model=VersionsResponse)
async def dictionary_versions(engine: SkillEngine = Depends(get_engine)):
    return VersionsResponse(
        current=engine.dictionary.current().version,
        versions=engine.dictionary.list_versions(),
    )


@router.get("/dictionary/versions/{version}", response_model=DictionaryResponse)
async def dictionary_version(version: str, engine: SkillEngine = Depends(get_engine)):
    return _dictionary_response(engine.dictionary.get_version(version))


@router.get("/dictionary/export", response_model=DictionaryExport)
async def export_dictionary(version: str | None = None, engine: SkillEngine = Depends(get_engine)):
    return engine.dictionary.export_version(version)


@router.post("/dictionary/import", response_model=ImportResult)
async def import_dictionary(body: ImportDictionaryRequest, engine: SkillEngine = Depends(get_engine)):
    return engine.dictionary.import_version(
        body.data, mode=body.mode, allow_older_version=body.allow_older_version
    )


@router.get("/dictionary/skills", response_model=list[CanonicalSkill])
async def list_skills(category: TechLayer | None = None, engine: SkillEngine = Depends(get_engine)):
    return engine.dictionary.list_skills(category)


@router.post("/dictionary/skills", response_model=DictionaryMutationResponse, status_code=201)
async def add_skill(body: AddSkillRequest, engine: SkillEngine = Depends(get_engine)):
    snapshot = engine.dictionary.add_canonical_skill(body.name, body.category)
    return DictionaryMutationResponse(version=snapshot.version, skill=snapshot.get_skill(body.name))


@router.post("/dictionary/variations", response_model=DictionaryMutationResponse, status_code=201)
async def add_variation(body: AddVariationRequest, engine: SkillEngine = Depends(get_engine)):
    snapshot = engine.dictionary.add_variation(body.variation, body.canonical_name)
    return DictionaryMutationResponse(version=snapshot.version, skill=snapshot.get_skill(body.canonical_name))


@router.get("/dictionary/skills/{name:path}/variations", response_model=VariationsResponse)
async def skill_variations(name: str, engine: SkillEngine = Depends(get_engine)):
    return VariationsResponse(skill=name, variations=engine.dictionary.get_variations(name))


@router.patch("/dictionary/skills/{name:path}", response_model=DictionaryMutationResponse)
async def update_skill(name: str, body: UpdateSkillRequest, engine: SkillEngine = Depends(get_engine)):
    snapshot = engine.dictionary.update_canonical_skill(name, body.new_name, body.category)
    return DictionaryMutationResponse(
        version=snapshot.version, skill=snapshot.get_skill(body.new_name or name)
    )


@router.delete("/dictionary/skills/{name:path}", response_model=DictionaryMutationResponse)
async def remove_skill(name: str, engine: SkillEngine = Depends(get_engine)):
    snapshot = engine.dictionary.remove_canonical_skill(name)
    return DictionaryMutationResponse(version=snapshot.version)


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize(body: NormalizeRequest, engine: SkillEngine = Depends(get_engine)):
    snapshot = engine.dictionary.current()
    skills = []
    for raw, result in zip(body.skills, resolve_many(body.skills, snapshot)):
        if isinstance(result, Resolved):
            skills.append(NormalizedSkill(
                raw=raw, resolved=True, canonical_name=result.canonical_name, category=result.category,
            ))
        else:
            skills.append(NormalizedSkill(raw=raw))
    return NormalizeResponse(dictionary_version=snapshot.version, skills=skills)


# ---------------------------------------------------------------------------
# Review queue
# ---------------------------------------------------------------------------

@router.get("/review-queue", response_model=list[UnknownSkillItem])
async def review_queue(
    sort_by: Literal["frequency", "name", "last_seen"] = "frequency",
    engine: SkillEngine = Depends(get_engine),
):
    return engine.review_queue.list_pending(sort_by)


@router.post("/review-queue/{name:path}/approve", response_model=ApprovalDecision)
async def approve_unknown(name: str, body: ApproveRequest, engine: SkillEngine = Depends(get_engine)):
    if body.action == "canonical":
        if body.category is None:
            raise HTTPException(status_code=422, detail="category is required to approve as canonical")
        return engine.review_queue.approve_as_canonical(name, body.category)
    if not body.canonical_name:
        raise HTTPException(status_code=422, detail="canonical_name is required to approve as variation")
    return engine.review_queue.approve_as_variation(name, body.canonical_name)


@router.post("/review-queue/{name:path}/reject", response_model=RejectionDecision)
async def reject_unknown(name: str, body: RejectRequest | None = None, engine: SkillEngine = Depends(get_engine)):
    return engine.review_queue.reject(name, body.reason if body else None)


# ---------------------------------------------------------------------------
# JD specs and matching
# ---------------------------------------------------------------------------

@router.post("/jd-specs", response_model=CreateJDSpecResult, status_code=201)
async def create_jd_spec(body: JDSpecRequest, engine: SkillEngine = Depends(get_engine)):
    return engine.jd_specs.create(body.role, body.layer_weights, body.skills)


@router.get("/jd-specs", response_model=list[CanonicalJDSpec])
async def list_jd_specs(engine: SkillEngine = Depends(get_engine)):
    return engine.jd_specs.list_all()


@router.get("/jd-specs/{spec_id}", response_model=CanonicalJDSpec)
async def get_jd_spec(spec_id: str, engine: SkillEngine = Depends(get_engine)):
    return engine.jd_specs.get(spec_id)


@router.put("/jd-specs/{spec_id}", response_model=UpdateJDSpecResult)
async def update_jd_spec(spec_id: str, body: JDSpecRequest, engine: SkillEngine = Depends(get_engine)):
    return engine.jd_specs.update(spec_id, body.role, body.layer_weights, body.skills)


@router.delete("/jd-specs/{spec_id}", status_code=204)
async def delete_jd_spec(spec_id: str, engine: SkillEngine = Depends(get_engine)):
    engine.jd_specs.delete(spec_id)


@router.get("/jd-specs/{spec_id}/correlation/{target_id}", response_model=CorrelationResult)
async def jd_correlation(spec_id: str, target_id: str, engine: SkillEngine = Depends(get_engine)):
    return engine.match_rates.jd_correlation(spec_id, target_id)


@router.get("/jd-specs/{spec_id}/resume-matches", response_model=list[ResumeMatchRate])
@limiter.limit(settings.match_rate_limit)
async def resume_matches(request: Request, spec_id: str, engine: SkillEngine = Depends(get_engine)):
    return engine.match_rates.all_resume_match_rates(spec_id)


@router.get("/jd-specs/{spec_id}/resume-matches/{resume_id}", response_model=ResumeMatchRate)
async def resume_match(spec_id: str, resume_id: str, engine: SkillEngine = Depends(get_engine)):
    return engine.match_rates.resume_match_rate(spec_id, resume_id)


@router.get("/bids/{bid_id}/matches", response_model=list[BidMatchRateResult])
@limiter.limit(settings.match_rate_limit)
async def bid_matches(request: Request, bid_id: str, engine: SkillEngine = Depends(get_engine)):
    return engine.match_rates.bid_match_rates(bid_id)


@router.get("/statistics/skills", response_model=SkillUsageStatistics)
async def skill_statistics(
    start: datetime | None = None,
    end: datetime | None = None,
    category: TechLayer | None = None,
    sort_by: Literal["frequency", "name"] = "frequency",
    sort_order: Literal["asc", "desc"] | None = None,
    engine: SkillEngine = Depends(get_engine),
):
    return engine.statistics.usage(start, end, category, sort_by, sort_order)
