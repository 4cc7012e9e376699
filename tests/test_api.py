"""
HTTP API tests: FastAPI TestClient against an in-memory database.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import build_container, get_container
from src.api.main import app
from src.config.settings import Settings
from src.infrastructure.auth.jwt_identity import issue_token
from tests.conftest import ACME_CNPJ, ANALYST_ID, REVIEWER_ID, VALID_CPF

SECRET = "api-test-secret"


@pytest.fixture
def client(session_factory, user_repo):
    settings = Settings(jwt_secret=SECRET, registry_enabled=False)
    container = build_container(settings, session_factory=session_factory)
    app.dependency_overrides[get_container] = lambda: container
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def ana():
    return {"Authorization": f"Bearer {issue_token(ANALYST_ID, 'ana@ccjb.com.br', SECRET)}"}


@pytest.fixture
def rui():
    return {"Authorization": f"Bearer {issue_token(REVIEWER_ID, 'rui@ccjb.com.br', SECRET)}"}


def create_company(client, headers, **overrides):
    body = {"cnpj": ACME_CNPJ, "name": "Acme Ltda", "due_date": "2025-12-31"}
    body.update(overrides)
    r = client.post("/api/v1/companies", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


class TestHealthAndAuth:

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_mutation_without_token_is_401(self, client):
        r = client.post("/api/v1/companies", json={"cnpj": ACME_CNPJ, "name": "Acme", "due_date": "2025-12-31"})
        assert r.status_code == 401
        assert r.json()["code"] == "NOT_AUTHENTICATED"

    def test_read_without_token_is_401(self, client):
        assert client.get("/api/v1/companies").status_code == 401

    def test_garbage_token_is_401(self, client):
        r = client.get("/api/v1/tasks", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

    def test_me(self, client, ana):
        r = client.get("/api/v1/me", headers=ana)
        assert r.status_code == 200
        assert r.json()["name"] == "Ana Analista"

    def test_update_me(self, client, ana):
        r = client.patch("/api/v1/me", json={"name": "Ana S."}, headers=ana)
        assert r.json()["name"] == "Ana S."


class TestCompaniesApi:

    def test_create_and_reopen(self, client, ana):
        company = create_company(client, ana)
        assert company["status"] == "todo"
        assert company["archived"] is False
        assert company["risk"] == "Baixo"
        assert company["creator"]["id"] == ANALYST_ID

        url = f"/api/v1/companies/{company['id']}/status"
        assert client.put(url, json={"status": "completed"}, headers=ana).json()["status"] == "completed"
        reopened = client.put(url, json={"status": "todo"}, headers=ana).json()
        assert reopened["status"] == "todo"
        assert reopened["name"] == "Acme Ltda"

    def test_validation_error_is_422(self, client, ana):
        r = client.post("/api/v1/companies", json={"cnpj": "123", "name": "X", "due_date": "2025-01-01"}, headers=ana)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_company_is_404(self, client, ana):
        r = client.get("/api/v1/companies/missing", headers=ana)
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_buckets_and_stats(self, client, ana):
        a = create_company(client, ana, name="A")
        create_company(client, ana, name="B", status="in-progress")
        client.post(f"/api/v1/companies/{a['id']}/archive", headers=ana)

        buckets = client.get("/api/v1/companies/buckets", headers=ana).json()
        assert buckets["todo"] == []
        assert [c["name"] for c in buckets["in-progress"]] == ["B"]
        assert [c["name"] for c in buckets["archived"]] == ["A"]

        stats = client.get("/api/v1/companies/stats", headers=ana).json()
        assert stats == {"todo": 0, "in_progress": 1, "completed": 0, "archived": 1, "total": 2}

    def test_partial_update(self, client, ana):
        company = create_company(client, ana)
        r = client.patch(f"/api/v1/companies/{company['id']}", json={"city": "Olinda"}, headers=ana)
        assert r.json()["city"] == "Olinda"
        assert r.json()["name"] == "Acme Ltda"

    def test_prefill_disabled_returns_empty(self, client, ana):
        r = client.get("/api/v1/companies/prefill", params={"cnpj": ACME_CNPJ}, headers=ana)
        assert r.status_code == 200
        assert r.json() == {}


class TestReviewApi:

    def test_representative_upsert_and_nested_view(self, client, ana):
        company = create_company(client, ana)
        url = f"/api/v1/companies/{company['id']}/representative"
        first = client.put(url, json={"name": "Maria", "cpf": VALID_CPF}, headers=ana).json()
        second = client.put(url, json={"name": "João", "cpf": VALID_CPF}, headers=ana).json()
        assert second["id"] == first["id"]
        assert second["name"] == "João"

        client.post(
            f"/api/v1/representatives/{first['id']}/notes",
            json={"type": "Aviso", "content": "RG vencido"},
            headers=ana,
        )
        loaded = client.get(f"/api/v1/companies/{company['id']}", headers=ana).json()
        assert loaded["representative"]["name"] == "João"
        assert loaded["representative"]["notes"][0]["content"] == "RG vencido"

    def test_representative_opinion_rejects_critico(self, client, ana):
        company = create_company(client, ana)
        rep = client.put(
            f"/api/v1/companies/{company['id']}/representative",
            json={"name": "Maria", "cpf": VALID_CPF},
            headers=ana,
        ).json()
        r = client.put(
            f"/api/v1/representatives/{rep['id']}/opinion",
            json={"risk": "Crítico", "orientation": "Rejeitar", "opinion": "x"},
            headers=ana,
        )
        assert r.status_code == 422

    def test_flow_authorship_is_403(self, client, ana, rui):
        company = create_company(client, ana)
        flow = client.post(
            f"/api/v1/companies/{company['id']}/flows",
            json={"kind": "cnpj", "check": "válido"},
            headers=ana,
        ).json()

        r = client.patch(f"/api/v1/flows/{flow['id']}", json={"check": "inválido"}, headers=rui)
        assert r.status_code == 403
        assert r.json()["code"] == "NOT_AUTHOR"

        assert client.delete(f"/api/v1/flows/{flow['id']}", headers=ana).status_code == 204

    def test_company_opinion_upsert(self, client, ana):
        company = create_company(client, ana)
        url = f"/api/v1/companies/{company['id']}/opinion"
        first = client.put(url, json={"risk": "Alto", "orientation": "Rejeitar", "opinion": "a"}, headers=ana).json()
        second = client.put(url, json={"risk": "Baixo", "orientation": "Aprovar", "opinion": "b"}, headers=ana).json()
        assert second["id"] == first["id"]
        assert second["orientation"] == "Aprovar"

    def test_opinion_of_another_author_is_403(self, client, ana, rui):
        company = create_company(client, ana)
        url = f"/api/v1/companies/{company['id']}/opinion"
        client.put(url, json={"risk": "Alto", "orientation": "Rejeitar", "opinion": "a"}, headers=ana)

        r = client.put(url, json={"risk": "Baixo", "orientation": "Aprovar", "opinion": "b"}, headers=rui)
        assert r.status_code == 403
        assert r.json()["code"] == "NOT_AUTHOR"


class TestTasksApi:

    def test_assignment_notifies_assignee(self, client, ana, rui):
        r = client.post(
            "/api/v1/tasks",
            json={"title": "Review X", "due_date": "2025-06-01", "assigned_to": REVIEWER_ID},
            headers=ana,
        )
        assert r.status_code == 201
        task = r.json()
        assert task["assignee"]["name"] == "Rui Revisor"

        unread = client.get("/api/v1/notifications/unread", headers=rui).json()
        assert unread["count"] == 1
        assert unread["notifications"][0]["task_id"] == task["id"]

        notification_id = unread["notifications"][0]["id"]
        assert client.post(f"/api/v1/notifications/{notification_id}/read", headers=ana).status_code == 403
        assert client.post(f"/api/v1/notifications/{notification_id}/read", headers=rui).json()["read"] is True

    def test_unknown_assignee_is_422(self, client, ana):
        r = client.post(
            "/api/v1/tasks",
            json={"title": "X", "due_date": "2025-06-01", "assigned_to": "nobody"},
            headers=ana,
        )
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_trash_lifecycle(self, client, ana):
        task = client.post("/api/v1/tasks", json={"title": "T", "due_date": "2025-06-01"}, headers=ana).json()
        assert task["assigned_to"] == ANALYST_ID

        client.post(f"/api/v1/tasks/{task['id']}/trash", headers=ana)
        restored = client.post(f"/api/v1/tasks/{task['id']}/restore-from-trash", headers=ana).json()
        assert restored["status"] == "nova"

        client.post(f"/api/v1/tasks/{task['id']}/trash", headers=ana)
        assert client.delete("/api/v1/tasks/trash", headers=ana).json() == {"count": 1}
        assert client.delete("/api/v1/tasks/trash", headers=ana).json() == {"count": 0}
        assert client.get(f"/api/v1/tasks/{task['id']}", headers=ana).status_code == 404

    def test_my_tasks(self, client, ana):
        client.post("/api/v1/tasks", json={"title": "Mine", "due_date": "2025-06-01"}, headers=ana)
        client.post(
            "/api/v1/tasks",
            json={"title": "Theirs", "due_date": "2025-06-01", "assigned_to": REVIEWER_ID},
            headers=ana,
        )
        assert [t["title"] for t in client.get("/api/v1/tasks/mine", headers=ana).json()] == ["Mine"]

    def test_users_for_assignment(self, client, ana):
        names = [u["name"] for u in client.get("/api/v1/users", headers=ana).json()]
        assert names == ["Ana Analista", "Rui Revisor"]
