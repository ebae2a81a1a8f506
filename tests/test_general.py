from sqlmodel import select

from core.config import settings
from core.middleware import SECURITY_HEADERS
from main import app
from models.contact import Contact
from services.broadcast import get_broadcaster


def test_root_and_ping_report_ok(client):
    for path in ("/", "/ping"):
        response = client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert "timestamp" in body


def test_unknown_route_returns_portuguese_404(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Rota /api/nope não encontrada"}


def test_every_response_carries_security_headers(client):
    for response in (client.get("/ping"), client.get("/missing"), client.post("/api/comments", json={})):
        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value


def test_cors_allows_any_origin_outside_production(client):
    response = client.get("/ping", headers={"Origin": "http://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_contact_is_stored_and_broadcast(client, broadcaster, session):
    response = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "ana@example.com", "message": "Gostei do site"},
    )

    assert response.status_code == 201
    contact = response.json()["contact"]
    assert contact["name"] == "Ana"
    assert "createdAt" in contact

    stored = session.exec(select(Contact)).all()
    assert len(stored) == 1
    assert broadcaster.events == [("newContact", contact)]


def test_contact_with_invalid_email_is_rejected(client, broadcaster, session):
    response = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "not-an-email", "message": "Oi"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Dados inválidos"
    assert [d["field"] for d in body["details"]] == ["email"]
    assert session.exec(select(Contact)).all() == []
    assert broadcaster.events == []


def test_contact_text_is_escaped_before_storage(client):
    response = client.post(
        "/api/contact",
        json={"name": "  <b>Ana</b> ", "email": "ana@example.com", "message": "<script>x</script>"},
    )

    contact = response.json()["contact"]
    assert contact["name"] == "&lt;b&gt;Ana&lt;/b&gt;"
    assert contact["message"] == "&lt;script&gt;x&lt;/script&gt;"


def test_malformed_json_is_a_client_error(client):
    response = client.post(
        "/api/contact",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_known_path_with_wrong_method_is_an_unmatched_route(client):
    response = client.get("/api/contact")

    assert response.status_code == 404
    assert response.json() == {"error": "Rota /api/contact não encontrada"}


def test_requests_past_the_rate_limit_get_429(client):
    allowed = int(settings.RATE_LIMIT.split("/")[0])
    for _ in range(allowed):
        assert client.get("/ping").status_code == 200

    response = client.get("/ping")

    assert response.status_code == 429
    assert response.json() == {"error": "Muitas requisições. Tente novamente mais tarde."}


def test_unexpected_error_is_a_json_500_with_cors_and_security_headers(client, session):
    def failing_broadcaster():
        raise RuntimeError("broadcaster offline")

    app.dependency_overrides[get_broadcaster] = failing_broadcaster

    response = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "ana@example.com", "message": "Oi"},
        headers={"Origin": "http://example.com"},
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Erro interno do servidor"
    assert "broadcaster offline" in body["details"]
    assert response.headers["access-control-allow-origin"] == "*"
    for name, value in SECURITY_HEADERS.items():
        assert response.headers[name] == value
