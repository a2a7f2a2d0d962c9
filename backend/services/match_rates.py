"""Match rates of JD specs against other JD specs, resumes and bids."""

import logging

from models.schemas import BidMatchRateResult, CorrelationResult, ResumeMatchRate
from services.correlation import correlate, correlate_specs
from services.errors import NotFoundError
from services.repositories import BidRepository, JDSpecRepository, ResumeRepository

logger = logging.getLogger(__name__)


def _percentage(rate: float) -> int:
    return int(round(rate * 100))


class MatchRateService:
    def __init__(
        self,
        jd_specs: JDSpecRepository,
        resumes: ResumeRepository,
        bids: BidRepository,
    ):
        self._jd_specs = jd_specs
        self._resumes = resumes
        self._bids = bids

    def jd_correlation(self, current_id: str, target_id: str) -> CorrelationResult:
        return correlate_specs(self._get_spec(current_id), self._get_spec(target_id))

    def resume_match_rate(self, jd_id: str, resume_id: str) -> ResumeMatchRate:
        spec = self._get_spec(jd_id)
        resume = self._resumes.get(resume_id)
        if resume is None:
            raise NotFoundError("Resume", resume_id)
        return self._score_resume(spec, resume)

    def all_resume_match_rates(self, jd_id: str) -> list[ResumeMatchRate]:
        spec = self._get_spec(jd_id)
        results = [self._score_resume(spec, r) for r in self._resumes.list_all()]
        results.sort(key=lambda r: (-r.match_rate, r.resume_id))
        logger.info("Scored %d resumes against JD spec %s", len(results), jd_id)
        return results

    def bid_match_rates(self, bid_id: str) -> list[BidMatchRateResult]:
        current = self._bids.get(bid_id)
        if current is None:
            raise NotFoundError("Bid", bid_id)
        results = []
        for other in self._bids.list_all():
            if other.id == current.id:
                continue
            result = correlate(current.skills, current.layer_weights, other.skills)
            results.append(BidMatchRateResult(
                bid_id=other.id,
                company=other.company,
                role=other.role,
                match_rate=result.overall_score,
                match_rate_percentage=_percentage(result.overall_score),
                layer_breakdown=result.layer_breakdown,
            ))
        results.sort(key=lambda r: (-r.match_rate, r.bid_id))
        return results

    def _score_resume(self, spec, resume) -> ResumeMatchRate:
        target = resume.skills
        if target is None and resume.jd_spec_id:
            linked = self._jd_specs.get(resume.jd_spec_id)
            target = linked.skills if linked else None

        if target is None:
            return ResumeMatchRate(
                resume_id=resume.id,
                company=resume.company,
                role=resume.role,
                jd_spec_id=resume.jd_spec_id,
            )
        result = correlate(spec.skills, spec.layer_weights, target, spec.dictionary_version)
        return ResumeMatchRate(
            resume_id=resume.id,
            company=resume.company,
            role=resume.role,
            jd_spec_id=resume.jd_spec_id,
            match_rate=result.overall_score,
            match_rate_percentage=_percentage(result.overall_score),
            layer_breakdown=result.layer_breakdown,
        )

    def _get_spec(self, spec_id: str):
        spec = self._jd_specs.get(spec_id)
        if spec is None:
            raise NotFoundError("JD spec", spec_id)
        return spec
