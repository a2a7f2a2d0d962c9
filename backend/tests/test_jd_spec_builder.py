import pytest

from models.schemas import LayerWeights, SkillWeight
from services.errors import (
    EmptyLayerError,
    LayerWeightSumError,
    NotFoundError,
    SkillWeightSumError,
    ValidationError,
    WeightSumError,
)

FRONTEND_ONLY = {"frontend": 1.0}


@pytest.fixture
def builder(engine):
    return engine.jd_specs


def test_variation_is_canonicalized(engine, builder):
    result = builder.create("Frontend Engineer", FRONTEND_ONLY, {"frontend": [("react.js", 1.0)]})

    entries = result.jd_spec.skills.frontend
    assert [(e.skill, e.weight, e.kind) for e in entries] == [("React", 1.0, "canonical")]
    assert result.unknown_skills == []
    assert result.jd_spec.dictionary_version == engine.dictionary.current().version


def test_unknown_skill_is_recorded(engine, builder):
    result = builder.create("Frontend Engineer", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]})

    assert result.unknown_skills == ["NextJS"]
    entry = result.jd_spec.skills.frontend[0]
    assert entry.kind == "unresolved"
    assert entry.skill == "NextJS"
    item = engine.review_queue.get("NextJS")
    assert item.frequency == 1
    assert item.sources == (result.jd_spec.id,)


def test_unknown_accumulates_across_specs(engine, builder):
    a = builder.create("A", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]})
    b = builder.create("B", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]})

    item = engine.review_queue.get("NextJS")
    assert item.frequency == 2
    assert set(item.sources) == {a.jd_spec.id, b.jd_spec.id}


def test_unknown_recorded_once_per_spec(engine, builder):
    result = builder.create(
        "Fullstack",
        {"frontend": 0.5, "backend": 0.5},
        {
            "frontend": [("NextJS", 0.5), ("React", 0.5)],
            "backend": [("nextjs", 0.4), ("Node.js", 0.6)],
        },
    )
    assert result.unknown_skills == ["NextJS"]
    assert engine.review_queue.get("NextJS").frequency == 1


def test_spec_ids_are_unique(builder):
    ids = {builder.create("A", FRONTEND_ONLY, {"frontend": [("React", 1.0)]}).jd_spec.id for _ in range(5)}
    assert len(ids) == 5


def test_accepts_models_and_mappings(builder):
    result = builder.create(
        "A",
        LayerWeights(frontend=1.0),
        {"frontend": [SkillWeight(skill="Vue", weight=0.6), {"skill": "React", "weight": 0.4}]},
    )
    assert [e.skill for e in result.jd_spec.skills.frontend] == ["Vue", "React"]


def test_duplicate_skills_are_merged(builder):
    result = builder.create("A", FRONTEND_ONLY, {"frontend": [("React", 0.5), ("react.js", 0.5)]})
    entries = result.jd_spec.skills.frontend
    assert len(entries) == 1
    assert entries[0].weight == pytest.approx(1.0)


def test_merged_duplicate_weight_is_capped(builder):
    result = builder.create("A", FRONTEND_ONLY, {"frontend": [("React", 0.5004), ("react.js", 0.5004)]})
    entries = result.jd_spec.skills.frontend
    assert len(entries) == 1
    assert entries[0].weight == 1.0


def test_zero_weight_layer_may_carry_skills(builder):
    result = builder.create(
        "A",
        {"frontend": 1.0, "database": 0.0},
        {"frontend": [("React", 1.0)], "database": [("postgres", 1.0)]},
    )
    assert result.jd_spec.skills.database[0].skill == "PostgreSQL"


def test_sums_within_tolerance(builder):
    result = builder.create(
        "A",
        {"frontend": 0.3333, "backend": 0.3333, "database": 0.3334},
        {
            "frontend": [("React", 0.3333), ("Vue", 0.6666)],
            "backend": [("Node.js", 1.0)],
            "database": [("PostgreSQL", 1.0)],
        },
    )
    assert result.jd_spec.layer_weights.total() == pytest.approx(1.0)


class TestValidation:
    def test_all_zero_layer_weights(self, engine, builder):
        with pytest.raises(LayerWeightSumError) as exc_info:
            builder.create("A", {}, {"frontend": [("NextJS", 1.0)]})
        assert isinstance(exc_info.value, WeightSumError)
        # rejected before normalization: nothing queued
        assert engine.review_queue.list_pending() == []

    def test_layer_weights_off_by_more_than_tolerance(self, builder):
        with pytest.raises(LayerWeightSumError):
            builder.create("A", {"frontend": 0.5, "backend": 0.498}, {
                "frontend": [("React", 1.0)], "backend": [("Node.js", 1.0)],
            })

    def test_layer_weight_out_of_range(self, builder):
        with pytest.raises(ValidationError) as exc_info:
            builder.create("A", {"frontend": 1.5, "backend": -0.5}, {
                "frontend": [("React", 1.0)], "backend": [("Node.js", 1.0)],
            })
        assert not isinstance(exc_info.value, WeightSumError)

    def test_unknown_layer(self, builder):
        with pytest.raises(ValidationError):
            builder.create("A", {"mobile": 1.0}, {})

    def test_skill_tuple_without_weight(self, builder):
        with pytest.raises(ValidationError):
            builder.create("A", FRONTEND_ONLY, {"frontend": [("React",)]})

    def test_blank_role(self, builder):
        with pytest.raises(ValidationError):
            builder.create("  ", FRONTEND_ONLY, {"frontend": [("React", 1.0)]})

    def test_weighted_layer_without_skills(self, builder):
        with pytest.raises(EmptyLayerError) as exc_info:
            builder.create("A", {"frontend": 0.5, "backend": 0.5}, {"frontend": [("React", 1.0)]})
        assert exc_info.value.layer == "backend"

    def test_skill_weights_do_not_sum_to_one(self, builder):
        with pytest.raises(SkillWeightSumError) as exc_info:
            builder.create("A", FRONTEND_ONLY, {"frontend": [("React", 0.6), ("Vue", 0.3)]})
        assert exc_info.value.layer == "frontend"
        assert exc_info.value.total == pytest.approx(0.9)

    def test_zero_weight_layer_skills_still_checked(self, builder):
        with pytest.raises(SkillWeightSumError):
            builder.create("A", FRONTEND_ONLY, {
                "frontend": [("React", 1.0)], "others": [("Git", 0.5)],
            })

    @pytest.mark.parametrize("weight", [0.0, -0.1, 1.5])
    def test_skill_weight_out_of_range(self, builder, weight):
        with pytest.raises(ValidationError):
            builder.create("A", FRONTEND_ONLY, {"frontend": [("React", weight), ("Vue", 1.0 - weight)]})

    @pytest.mark.parametrize("name", ["", "   ", "x" * 101])
    def test_invalid_skill_name(self, builder, name):
        with pytest.raises(ValidationError):
            builder.create("A", FRONTEND_ONLY, {"frontend": [(name, 1.0)]})

    def test_validation_completes_before_queue_mutation(self, engine, builder):
        with pytest.raises(SkillWeightSumError):
            builder.create("A", {"frontend": 0.5, "backend": 0.5}, {
                "frontend": [("NextJS", 1.0)],
                "backend": [("Node.js", 0.5)],
            })
        assert engine.review_queue.list_pending() == []
        assert builder.list_all() == []


class TestUpdate:
    def test_repins_to_current_version(self, engine, builder, clock):
        created = builder.create("A", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]}).jd_spec
        engine.review_queue.approve_as_canonical("NextJS", "frontend")
        clock.advance(hours=2)

        result = builder.update(created.id, "A v2", FRONTEND_ONLY, {"frontend": [("nextjs", 1.0)]})
        spec = result.jd_spec

        assert spec.id == created.id
        assert spec.role == "A v2"
        assert spec.created_at == created.created_at
        assert spec.updated_at == clock()
        assert spec.dictionary_version == engine.dictionary.current().version
        assert spec.dictionary_version != created.dictionary_version
        assert spec.skills.frontend[0].kind == "canonical"
        assert result.unknown_skills == []

    def test_only_new_unknowns_are_recorded(self, engine, builder):
        created = builder.create("A", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]}).jd_spec
        result = builder.update(created.id, "A", FRONTEND_ONLY, {
            "frontend": [("NextJS", 0.5), ("Remix", 0.5)],
        })

        assert result.unknown_skills == ["NextJS", "Remix"]
        assert result.new_unknown_skills == ["Remix"]
        assert engine.review_queue.get("NextJS").frequency == 1
        assert engine.review_queue.get("Remix").frequency == 1

    def test_existing_specs_unchanged_by_approval(self, engine, builder):
        created = builder.create("A", FRONTEND_ONLY, {"frontend": [("NextJS", 1.0)]}).jd_spec
        engine.review_queue.approve_as_canonical("NextJS", "frontend")
        assert builder.get(created.id).skills.frontend[0].kind == "unresolved"

    def test_update_missing_spec(self, builder):
        with pytest.raises(NotFoundError):
            builder.update("jd_missing", "A", FRONTEND_ONLY, {"frontend": [("React", 1.0)]})


def test_get_list_delete(builder, clock):
    first = builder.create("A", FRONTEND_ONLY, {"frontend": [("React", 1.0)]}).jd_spec
    clock.advance(minutes=1)
    second = builder.create("B", FRONTEND_ONLY, {"frontend": [("Vue", 1.0)]}).jd_spec

    assert builder.get(first.id) == first
    assert [s.id for s in builder.list_all()] == [first.id, second.id]

    builder.delete(first.id)
    with pytest.raises(NotFoundError):
        builder.get(first.id)
    with pytest.raises(NotFoundError):
        builder.delete(first.id)
