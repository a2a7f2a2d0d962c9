import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_engine
from main import app
from models.schemas import BidRecord, LayerSkills, LayerWeights, ResumeRecord, SkillEntry


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_spec(client, role, weights, skills):
    response = client.post("/jd-specs", json={"role": role, "layer_weights": weights, "skills": skills})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client, engine):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["dictionary_version"] == engine.dictionary.current().version


class TestDictionaryEndpoints:
    def test_current(self, client):
        data = client.get("/dictionary").json()
        assert data["skill_count"] == 4
        assert {s["name"] for s in data["skills"]} == {"React", "Vue", "Node.js", "PostgreSQL"}

    def test_versions(self, client):
        data = client.get("/dictionary/versions").json()
        assert data["versions"][0] == "2025.1"
        assert data["current"] == data["versions"][-1]
        assert client.get("/dictionary/versions/2025.1").json()["skill_count"] == 0
        assert client.get("/dictionary/versions/1999.1").status_code == 404

    def test_list_by_category(self, client):
        data = client.get("/dictionary/skills", params={"category": "database"}).json()
        assert [s["name"] for s in data] == ["PostgreSQL"]

    def test_add_skill_and_duplicate(self, client):
        response = client.post("/dictionary/skills", json={"name": "Svelte", "category": "frontend"})
        assert response.status_code == 201
        assert response.json()["skill"]["name"] == "Svelte"

        response = client.post("/dictionary/skills", json={"name": "svelte", "category": "frontend"})
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateSkillError"

    def test_blank_skill_name(self, client):
        response = client.post("/dictionary/skills", json={"name": " ", "category": "frontend"})
        assert response.status_code == 422

    def test_variations(self, client):
        response = client.post("/dictionary/variations", json={"variation": "vuejs", "canonical_name": "Vue"})
        assert response.status_code == 201
        assert client.get("/dictionary/skills/Vue/variations").json()["variations"] == ["vuejs"]
        assert client.get("/dictionary/skills/Svelte/variations").status_code == 404

    def test_skill_names_with_slashes(self, client):
        client.post("/dictionary/skills", json={"name": "CI/CD", "category": "devops"})
        client.post("/dictionary/variations", json={"variation": "cicd", "canonical_name": "CI/CD"})
        assert client.get("/dictionary/skills/CI/CD/variations").json()["variations"] == ["cicd"]

    def test_update_and_remove(self, client):
        response = client.patch("/dictionary/skills/Vue", json={"new_name": "Vue 3"})
        assert response.status_code == 200
        assert response.json()["skill"]["name"] == "Vue 3"

        assert client.delete("/dictionary/skills/Vue 3").status_code == 200
        assert client.delete("/dictionary/skills/Vue 3").status_code == 404

    def test_export_import(self, client):
        exported = client.get("/dictionary/export").json()
        exported["version"] = "2030.1"
        exported["skills"].append({"name": "Go", "category": "backend", "variations": ["golang"]})

        response = client.post("/dictionary/import", json={"data": exported, "mode": "merge"})
        assert response.status_code == 200
        assert response.json()["skills_added"] == 1

        exported["version"] = "2020.1"
        response = client.post("/dictionary/import", json={"data": exported, "mode": "replace"})
        assert response.status_code == 409

    def test_normalize(self, client):
        data = client.post("/normalize", json={"skills": ["react.js", "NextJS"]}).json()
        assert data["skills"][0] == {
            "raw": "react.js", "resolved": True, "canonical_name": "React", "category": "frontend",
        }
        assert data["skills"][1]["resolved"] is False


class TestJDSpecEndpoints:
    def test_create_get_delete(self, client):
        data = create_spec(client, "Frontend", {"frontend": 1.0}, {"frontend": [{"skill": "NextJS", "weight": 1.0}]})
        spec_id = data["jd_spec"]["id"]
        assert data["unknown_skills"] == ["NextJS"]
        assert data["jd_spec"]["skills"]["frontend"][0]["kind"] == "unresolved"

        assert client.get(f"/jd-specs/{spec_id}").json()["role"] == "Frontend"
        assert len(client.get("/jd-specs").json()) == 1
        assert client.delete(f"/jd-specs/{spec_id}").status_code == 204
        assert client.get(f"/jd-specs/{spec_id}").status_code == 404

    def test_weight_errors(self, client):
        response = client.post("/jd-specs", json={
            "role": "A", "layer_weights": {}, "skills": {"frontend": [{"skill": "React", "weight": 1.0}]},
        })
        assert response.status_code == 422
        assert response.json()["error"] == "LayerWeightSumError"

        response = client.post("/jd-specs", json={
            "role": "A", "layer_weights": {"frontend": 1.0}, "skills": {"frontend": []},
        })
        assert response.json()["error"] == "EmptyLayerError"

    def test_unknown_layer_is_rejected_by_schema(self, client):
        response = client.post("/jd-specs", json={
            "role": "A", "layer_weights": {"frontend": 1.0}, "skills": {"mobile": []},
        })
        assert response.status_code == 422

    def test_misspelled_layer_weight_is_rejected(self, client):
        response = client.post("/jd-specs", json={
            "role": "A",
            "layer_weights": {"frontend": 0.7, "bakend": 0.3},
            "skills": {"frontend": [{"skill": "React", "weight": 1.0}]},
        })
        assert response.status_code == 422

    def test_update(self, client):
        spec_id = create_spec(client, "A", {"frontend": 1.0}, {"frontend": [{"skill": "React", "weight": 1.0}]})["jd_spec"]["id"]
        response = client.put(f"/jd-specs/{spec_id}", json={
            "role": "A", "layer_weights": {"frontend": 1.0}, "skills": {"frontend": [{"skill": "Remix", "weight": 1.0}]},
        })
        assert response.status_code == 200
        assert response.json()["new_unknown_skills"] == ["Remix"]

    def test_correlation(self, client):
        a = create_spec(client, "A", {"frontend": 1.0}, {"frontend": [{"skill": "React", "weight": 1.0}]})
        b = create_spec(client, "B", {"frontend": 1.0}, {"frontend": [
            {"skill": "React", "weight": 0.6}, {"skill": "Vue", "weight": 0.4},
        ]})
        data = client.get(f"/jd-specs/{a['jd_spec']['id']}/correlation/{b['jd_spec']['id']}").json()
        assert data["overall_score"] == pytest.approx(0.6)
        assert data["layer_breakdown"][0]["matching_skills"] == ["React"]
        assert data["layer_breakdown"][0]["missing_skills"] == []


def test_review_queue_flow(client, engine):
    create_spec(client, "A", {"frontend": 1.0}, {"frontend": [
        {"skill": "Svelte", "weight": 0.5}, {"skill": "VueJS", "weight": 0.5},
    ]})
    create_spec(client, "B", {"frontend": 1.0}, {"frontend": [{"skill": "Synergy", "weight": 1.0}]})
    assert {i["name"] for i in client.get("/review-queue").json()} == {"Svelte", "VueJS", "Synergy"}

    response = client.post("/review-queue/Svelte/approve", json={"action": "canonical"})
    assert response.status_code == 422

    response = client.post("/review-queue/Svelte/approve", json={"action": "canonical", "category": "frontend"})
    assert response.json()["dictionary_version"] == engine.dictionary.current().version

    response = client.post("/review-queue/VueJS/approve", json={"action": "variation", "canonical_name": "Vue"})
    assert response.json()["canonical_name"] == "Vue"

    response = client.post("/review-queue/Synergy/reject", json={"reason": "buzzword"})
    assert response.json()["reason"] == "buzzword"

    assert client.get("/review-queue").json() == []
    assert client.post("/review-queue/Synergy/reject").status_code == 404


def test_match_rate_endpoints(client, engine, clock):
    spec = create_spec(client, "A", {"frontend": 1.0}, {"frontend": [{"skill": "React", "weight": 1.0}]})["jd_spec"]
    react = LayerSkills(frontend=(SkillEntry(skill="React", weight=1.0),))
    engine.resume_repository.save(ResumeRecord(id="r1", company="Acme", role="FE", skills=react, created_at=clock()))
    for bid_id in ("b1", "b2"):
        engine.bid_repository.save(BidRecord(
            id=bid_id, company="Acme", role="FE",
            layer_weights=LayerWeights(frontend=1.0), skills=react, created_at=clock(),
        ))

    matches = client.get(f"/jd-specs/{spec['id']}/resume-matches").json()
    assert matches[0]["match_rate_percentage"] == 100
    assert client.get(f"/jd-specs/{spec['id']}/resume-matches/r1").json()["resume_id"] == "r1"
    assert client.get(f"/jd-specs/{spec['id']}/resume-matches/r9").status_code == 404

    bids = client.get("/bids/b1/matches").json()
    assert [b["bid_id"] for b in bids] == ["b2"]


def test_statistics_endpoint(client):
    create_spec(client, "A", {"frontend": 1.0}, {"frontend": [{"skill": "react.js", "weight": 1.0}]})
    data = client.get("/statistics/skills", params={"category": "frontend"}).json()
    assert data["total_skills"] == 1
    assert data["statistics"][0]["skill_name"] == "React"
    assert client.get("/statistics/skills", params={"sort_by": "size"}).status_code == 422
