"""
API integration tests using FastAPI TestClient with in-memory DB.
"""
import pytest
from fastapi.testclient import TestClient

BASE = "/api/learning-paths"


def create_path(client, topic="Python", level="beginner", **extra):
    response = client.post(BASE, json={"topic": topic, "level": level, **extra})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestHealthRoutes:
    def test_root_returns_healthy(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        assert "healthy" in response.json()["message"].lower()
        assert response.headers.get("x-request-id")


@pytest.mark.integration
class TestAuthRoutes:
    def test_register_and_me(self, api_client: TestClient, register):
        register(api_client, "new@example.com")
        response = api_client.get("/auth/me")
        assert response.status_code == 200
        assert response.json()["email"] == "new@example.com"

    def test_register_duplicate_fails(self, api_client: TestClient, register):
        register(api_client, "dup@example.com")
        response = api_client.post(
            "/auth/register",
            json={"email": "dup@example.com", "password": "x", "confirm_password": "x"},
        )
        assert response.status_code == 400

    def test_password_mismatch(self, api_client: TestClient):
        response = api_client.post(
            "/auth/register",
            json={"email": "m@example.com", "password": "a", "confirm_password": "b"},
        )
        assert response.status_code == 400

    def test_login_and_logout(self, api_client: TestClient, register):
        register(api_client, "login@example.com", "mypass")
        api_client.post("/auth/logout")
        api_client.cookies.clear()
        assert api_client.get("/auth/me").status_code == 401

        bad = api_client.post("/auth/login", json={"email": "login@example.com", "password": "wrong"})
        assert bad.status_code == 401
        good = api_client.post("/auth/login", json={"email": "login@example.com", "password": "mypass"})
        assert good.status_code == 200 and good.json()["token_set"] is True
        assert api_client.get("/auth/me").status_code == 200

    def test_learning_paths_require_auth(self, api_client: TestClient):
        assert api_client.get(BASE).status_code == 401
        assert api_client.post(BASE, json={"topic": "Python"}).status_code == 401


@pytest.mark.integration
class TestLearningPathRoutes:
    def test_create_and_get(self, authed_client: TestClient):
        created = create_path(authed_client)
        assert created["title"] == "Learning Path: Python"
        assert len(created["steps"]) == 10
        assert [cp["after_step"] for cp in created["checkpoints"]] == [3.0, 6.0, 9.0]
        assert created["version"] == 1

        fetched = authed_client.get(f"{BASE}/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["raw_content"] == created["raw_content"]

    def test_create_requires_topic(self, authed_client: TestClient):
        assert authed_client.post(BASE, json={"topic": "  "}).status_code == 400
        assert authed_client.post(BASE, json={}).status_code == 422

    def test_list(self, authed_client: TestClient):
        create_path(authed_client, "A")
        create_path(authed_client, "B")
        response = authed_client.get(BASE, params={"limit": 1})
        assert response.status_code == 200
        assert len(response.json()["paths"]) == 1

    def test_unknown_path(self, authed_client: TestClient):
        assert authed_client.get(f"{BASE}/does-not-exist").status_code == 404

    def test_other_users_private_path_forbidden(self, authed_client: TestClient, register):
        created = create_path(authed_client)
        authed_client.cookies.clear()
        register(authed_client, "other@example.com")
        assert authed_client.get(f"{BASE}/{created['id']}").status_code == 403
        step_id = created["steps"][0]["id"]
        assert authed_client.post(f"{BASE}/{created['id']}/steps/{step_id}/complete").status_code == 403

    def test_update(self, authed_client: TestClient):
        created = create_path(authed_client)
        response = authed_client.put(f"{BASE}/{created['id']}", json={"title": "Renamed", "is_public": True})
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed" and body["is_public"] is True and body["version"] == 2
        assert authed_client.put(f"{BASE}/{created['id']}", json={"title": ""}).status_code == 400

    @pytest.mark.parametrize("field", ["description", "raw_content", "is_public", "is_adaptive"])
    def test_update_with_null_field(self, authed_client: TestClient, field):
        created = create_path(authed_client)
        url = f"{BASE}/{created['id']}"
        assert authed_client.put(url, json={field: None}).status_code == 400
        fetched = authed_client.get(url)
        assert fetched.status_code == 200
        assert fetched.json()["version"] == 1
        assert fetched.json()[field] == created[field]

    def test_complete_and_reopen_step(self, authed_client: TestClient):
        created = create_path(authed_client)
        path_id = created["id"]
        steps = [s["id"] for s in created["steps"]]
        for step_id in steps[:3]:
            response = authed_client.post(f"{BASE}/{path_id}/steps/{step_id}/complete")
            assert response.status_code == 200
        body = response.json()
        assert body["should_take_checkpoint"] is True
        assert body["path"]["progress"] == 30

        reopened = authed_client.post(f"{BASE}/{path_id}/steps/{steps[0]}/reopen")
        assert reopened.status_code == 200
        assert reopened.json()["progress"] == 20
        assert authed_client.post(f"{BASE}/{path_id}/steps/nope/complete").status_code == 404

    def test_take_checkpoint_adapts(self, authed_client: TestClient):
        created = create_path(authed_client)
        cp = created["checkpoints"][0]
        response = authed_client.post(f"{BASE}/{created['id']}/checkpoints/{cp['id']}", json={"answers": [0, 1, 1]})
        assert response.status_code == 200
        body = response.json()
        assert body["checkpoint"]["score"] == 33
        assert body["checkpoint"]["performance_data"]["needs_remediation"] is True
        titles = [s["title"] for s in body["path"]["steps"]]
        assert titles[3:5] == ["Review: Loops", "Review: Functions"]

    def test_take_checkpoint_validation(self, authed_client: TestClient):
        created = create_path(authed_client)
        cp = created["checkpoints"][0]
        url = f"{BASE}/{created['id']}/checkpoints/{cp['id']}"
        assert authed_client.post(url, json={}).status_code == 400
        assert authed_client.post(url, json={"answers": [0, 0, 0, 0, 0]}).status_code == 400
        assert authed_client.post(f"{BASE}/{created['id']}/checkpoints/nope", json={"answers": [0]}).status_code == 404

    def test_adapt(self, authed_client: TestClient):
        created = create_path(authed_client)
        cp = created["checkpoints"][0]
        response = authed_client.post(
            f"{BASE}/{created['id']}/adapt",
            json={"checkpoint_id": cp["id"], "score": 95},
        )
        assert response.status_code == 200
        advanced = [s for s in response.json()["steps"] if s["origin"] == "advanced"]
        assert len(advanced) == 1 and advanced[0]["order"] == pytest.approx(3.2)

    def test_branch(self, authed_client: TestClient):
        created = create_path(authed_client)
        response = authed_client.post(
            f"{BASE}/{created['id']}/branches",
            json={"name": "Async", "condition": "interest", "level": "advanced"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["branches"][0]["name"] == "Async"
        assert len(body["branches"][0]["step_ids"]) == 5
        assert len(body["steps"]) == 15
        bad = authed_client.post(f"{BASE}/{created['id']}/branches", json={"name": "X", "condition": "never"})
        assert bad.status_code == 422

    def test_prerequisites(self, authed_client: TestClient):
        response = authed_client.get(f"{BASE}/prerequisites", params={"topic": "Kubernetes", "level": "intermediate"})
        assert response.status_code == 200
        prereqs = response.json()["prerequisites"]
        assert [p["importance"] for p in prereqs] == ["required", "recommended"]
        assert authed_client.get(f"{BASE}/prerequisites").status_code == 400

    def test_compact(self, authed_client: TestClient):
        created = create_path(authed_client)
        cp = created["checkpoints"][0]
        authed_client.post(f"{BASE}/{created['id']}/adapt", json={"checkpoint_id": cp["id"], "score": 10, "incorrect_areas": ["A"]})
        response = authed_client.post(f"{BASE}/{created['id']}/compact")
        assert response.status_code == 200
        assert [s["order"] for s in response.json()["steps"]] == [float(i) for i in range(1, 12)]
