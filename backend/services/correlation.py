"""Deterministic correlation between two canonical, weighted skill sets.

Per layer the score is the dot product of the current side's skill weights
with the target side's weights over the skills both sides share. The
overall score weights each layer score by the current side's layer weight.
"""

import logging

import numpy as np

from models.schemas import (
    CanonicalJDSpec,
    CorrelationResult,
    LayerCorrelationResult,
    LayerSkills,
    LayerWeights,
    TechLayer,
)

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


def correlate_layer(
    layer: TechLayer,
    weight: float,
    current_skills: LayerSkills,
    target_skills: LayerSkills,
) -> LayerCorrelationResult:
    if weight <= 0:
        return LayerCorrelationResult(layer=layer, score=0.0, weight=weight)

    target: dict[tuple[str, str], float] = {}
    for entry in target_skills.get(layer):
        target[entry.key] = target.get(entry.key, 0.0) + entry.weight

    current = current_skills.get(layer)
    matching = [e for e in current if e.key in target]
    missing = [e.skill for e in current if e.key not in target]

    score = 0.0
    if matching:
        current_vec = np.array([e.weight for e in matching], dtype=np.float64)
        target_vec = np.array([target[e.key] for e in matching], dtype=np.float64)
        score = float(current_vec @ target_vec)

    return LayerCorrelationResult(
        layer=layer,
        score=_clamp(score),
        weight=weight,
        matching_skills=[e.skill for e in matching],
        missing_skills=missing,
    )


def correlate(
    current_skills: LayerSkills,
    current_weights: LayerWeights,
    target_skills: LayerSkills,
    dictionary_version: str = "",
) -> CorrelationResult:
    """Score how well ``target_skills`` covers the weighted ``current_skills``.

    Asymmetric: missing skills are reported for the current side only, and
    only the current side's layer weights count. A spec correlates to 1.0
    with itself only when every weighted layer holds a single skill.
    """
    breakdown = [
        correlate_layer(layer, current_weights.get(layer), current_skills, target_skills)
        for layer in TechLayer
    ]
    scores = np.array([r.score for r in breakdown], dtype=np.float64)
    weights = np.array([max(r.weight, 0.0) for r in breakdown], dtype=np.float64)
    overall = _clamp(float(scores @ weights))

    return CorrelationResult(
        overall_score=overall,
        layer_breakdown=breakdown,
        dictionary_version=dictionary_version,
    )


def correlate_specs(current: CanonicalJDSpec, target: CanonicalJDSpec) -> CorrelationResult:
    if current.dictionary_version != target.dictionary_version:
        logger.debug(
            "Correlating %s (v%s) with %s (v%s) across dictionary versions",
            current.id, current.dictionary_version, target.id, target.dictionary_version,
        )
    return correlate(current.skills, current.layer_weights, target.skills, current.dictionary_version)
