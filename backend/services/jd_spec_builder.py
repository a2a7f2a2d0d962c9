"""Build canonical JD specs from raw layer weights and per-layer skills.

Validation runs to completion before anything is normalized or recorded,
so a rejected request leaves the dictionary and the review queue untouched.
"""

import logging
import math
import secrets
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from models.schemas import (
    CanonicalJDSpec,
    CreateJDSpecResult,
    LayerSkills,
    LayerWeights,
    SkillEntry,
    SkillWeight,
    TechLayer,
    UpdateJDSpecResult,
    normalize_key,
)
from services.errors import (
    EmptyLayerError,
    LayerWeightSumError,
    NotFoundError,
    SkillWeightSumError,
    ValidationError,
)
from services.repositories import JDSpecRepository
from services.review_queue import ReviewQueue
from services.skill_dictionary import SkillDictionaryService, utcnow
from services.skill_normalizer import Resolved, resolve

logger = logging.getLogger(__name__)

RawSkill = SkillWeight | Mapping | tuple[str, float]
RawSkills = Mapping[TechLayer | str, Sequence[RawSkill]]


class JDSpecBuilder:
    def __init__(
        self,
        repository: JDSpecRepository,
        dictionary: SkillDictionaryService,
        review_queue: ReviewQueue,
        clock: Callable[[], datetime] = utcnow,
        tolerance: float = 0.001,
        max_skill_name_length: int = 100,
    ):
        self._repository = repository
        self._dictionary = dictionary
        self._review_queue = review_queue
        self._clock = clock
        self._tolerance = tolerance
        self._max_skill_name_length = max_skill_name_length

    def create(
        self,
        role: str,
        layer_weights: LayerWeights | Mapping[str, float],
        skills: RawSkills,
    ) -> CreateJDSpecResult:
        role, weights, raw = self._validate(role, layer_weights, skills)
        now = self._clock()
        spec_id = f"jd_{int(now.timestamp() * 1000)}_{secrets.token_hex(4)}"

        layer_skills, unknowns, version = self._normalize(raw)
        spec = CanonicalJDSpec(
            id=spec_id,
            role=role,
            layer_weights=weights,
            skills=layer_skills,
            dictionary_version=version,
            created_at=now,
        )
        self._repository.save(spec)
        for name in unknowns:
            self._review_queue.record_unknown(name, spec_id)

        logger.info(
            "Created JD spec %s for '%s' (dictionary v%s, %d unknown skills)",
            spec_id, role, version, len(unknowns),
        )
        return CreateJDSpecResult(jd_spec=spec, unknown_skills=unknowns)

    def update(
        self,
        spec_id: str,
        role: str,
        layer_weights: LayerWeights | Mapping[str, float],
        skills: RawSkills,
    ) -> UpdateJDSpecResult:
        """Re-normalize a spec against the current dictionary version."""
        existing = self.get(spec_id)
        role, weights, raw = self._validate(role, layer_weights, skills)

        layer_skills, unknowns, version = self._normalize(raw)
        previous = {normalize_key(s) for s in existing.unresolved_skills()}
        new_unknowns = [u for u in unknowns if normalize_key(u) not in previous]

        spec = existing.model_copy(update={
            "role": role,
            "layer_weights": weights,
            "skills": layer_skills,
            "dictionary_version": version,
            "updated_at": self._clock(),
        })
        self._repository.save(spec)
        for name in new_unknowns:
            self._review_queue.record_unknown(name, spec_id)

        logger.info(
            "Updated JD spec %s (dictionary v%s -> v%s, %d new unknown skills)",
            spec_id, existing.dictionary_version, version, len(new_unknowns),
        )
        return UpdateJDSpecResult(jd_spec=spec, unknown_skills=unknowns, new_unknown_skills=new_unknowns)

    def get(self, spec_id: str) -> CanonicalJDSpec:
        spec = self._repository.get(spec_id)
        if spec is None:
            raise NotFoundError("JD spec", spec_id)
        return spec

    def list_all(self) -> list[CanonicalJDSpec]:
        return sorted(self._repository.list_all(), key=lambda s: (s.created_at, s.id))

    def delete(self, spec_id: str) -> None:
        if not self._repository.delete(spec_id):
            raise NotFoundError("JD spec", spec_id)
        logger.info("Deleted JD spec %s", spec_id)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(
        self,
        role: str,
        layer_weights: LayerWeights | Mapping[str, float],
        skills: RawSkills,
    ) -> tuple[str, LayerWeights, dict[TechLayer, list[SkillWeight]]]:
        if not isinstance(role, str) or not role.strip():
            raise ValidationError("Role must not be blank")

        weights = _coerce_weights(layer_weights)
        for layer in TechLayer:
            value = weights.get(layer)
            if not math.isfinite(value) or value < 0.0 or value > 1.0:
                raise ValidationError(f"Layer weight for '{layer.value}' must be within [0, 1], got {value}")
        total = weights.total()
        if abs(total - 1.0) > self._tolerance:
            raise LayerWeightSumError(f"Layer weights must sum to 1.0, got {total:.4f}", total)

        raw = _coerce_skills(skills)
        for layer in TechLayer:
            entries = raw.get(layer, [])
            if weights.get(layer) > 0 and not entries:
                raise EmptyLayerError(layer.value)
            if not entries:
                continue
            for entry in entries:
                self._validate_skill(layer, entry)
            layer_total = sum(e.weight for e in entries)
            if abs(layer_total - 1.0) > self._tolerance:
                raise SkillWeightSumError(
                    f"Skill weights in '{layer.value}' must sum to 1.0, got {layer_total:.4f}",
                    layer_total,
                    layer.value,
                )
        return role.strip(), weights, raw

    def _validate_skill(self, layer: TechLayer, entry: SkillWeight) -> None:
        if not entry.skill or not entry.skill.strip():
            raise ValidationError(f"Skill name in '{layer.value}' must not be blank")
        if len(entry.skill.strip()) > self._max_skill_name_length:
            raise ValidationError(
                f"Skill '{entry.skill[:20]}...' exceeds {self._max_skill_name_length} characters"
            )
        if not math.isfinite(entry.weight) or entry.weight <= 0.0 or entry.weight > 1.0:
            raise ValidationError(
                f"Skill weight for '{entry.skill}' must be within (0, 1], got {entry.weight}"
            )

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def _normalize(
        self, raw: dict[TechLayer, list[SkillWeight]]
    ) -> tuple[LayerSkills, list[str], str]:
        snapshot = self._dictionary.current()
        unknowns: dict[str, str] = {}  # key -> first-seen spelling
        per_layer: dict[str, tuple[SkillEntry, ...]] = {}

        for layer in TechLayer:
            merged: dict[tuple[str, str], SkillEntry] = {}
            for item in raw.get(layer, []):
                result = resolve(item.skill, snapshot)
                if isinstance(result, Resolved):
                    entry = SkillEntry(skill=result.canonical_name, weight=item.weight)
                else:
                    entry = SkillEntry(skill=result.raw, weight=item.weight, kind="unresolved")
                    unknowns.setdefault(normalize_key(result.raw), result.raw)
                if entry.key in merged:
                    previous = merged[entry.key]
                    # sums within tolerance may overshoot 1.0
                    weight = min(1.0, previous.weight + entry.weight)
                    entry = previous.model_copy(update={"weight": weight})
                merged[entry.key] = entry
            per_layer[layer.value] = tuple(merged.values())

        return LayerSkills(**per_layer), list(unknowns.values()), snapshot.version


def _coerce_weights(layer_weights: LayerWeights | Mapping[str, float]) -> LayerWeights:
    if isinstance(layer_weights, LayerWeights):
        return layer_weights
    values = {}
    for key, value in dict(layer_weights).items():
        try:
            layer = TechLayer(key)
        except ValueError as exc:
            raise ValidationError(f"Unknown layer '{key}'") from exc
        values[layer.value] = value
    try:
        return LayerWeights(**values)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid layer weights ({exc.error_count()} errors)") from exc


def _coerce_skills(skills: RawSkills) -> dict[TechLayer, list[SkillWeight]]:
    result: dict[TechLayer, list[SkillWeight]] = {}
    for key, items in dict(skills or {}).items():
        try:
            layer = TechLayer(key)
        except ValueError as exc:
            raise ValidationError(f"Unknown layer '{key}'") from exc
        coerced = []
        for item in items:
            try:
                if isinstance(item, SkillWeight):
                    coerced.append(item)
                elif isinstance(item, tuple):
                    if len(item) != 2:
                        raise ValidationError(
                            f"Skill entry in '{layer.value}' must be a (skill, weight) pair: {item!r}"
                        )
                    coerced.append(SkillWeight(skill=item[0], weight=item[1]))
                else:
                    coerced.append(SkillWeight.model_validate(item))
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid skill entry in '{layer.value}': {item!r}") from exc
        result[layer] = coerced
    return result
