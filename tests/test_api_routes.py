from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from jose import jwt

from app.api import agents as agents_api
from app.api import clients as clients_api
from app.api import evaluations as evaluations_api
from app.api import monthly as monthly_api
from app.db import get_db
from app.errors import DataServiceError
from app.main import app
from app.services import dashboard as dashboard_module


def _override_db(db):
    def _get_db_override():
        yield db

    app.dependency_overrides[get_db] = _get_db_override


def _headers(email="viewer@example.com"):
    token = jwt.encode({"sub": "user-1", "email": email}, "test-secret", algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def test_health_and_metrics_are_public():
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}
    assert client.head("/health").status_code == 200
    assert client.get("/metrics").status_code == 200


def test_routes_require_a_token(auth_settings):
    client = TestClient(app)
    assert client.get("/dashboard").status_code == 401
    assert client.get("/api/v1/clients").status_code == 401


def test_unauthorized_operation_maps_to_403(auth_settings):
    db = MagicMock()
    _override_db(db)
    try:
        client = TestClient(app)
        response = client.post("/monthly/reset", json={"new_month": 10, "new_year": 2025}, headers=_headers())
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 403
    assert response.json() == {"detail": "Unauthorized"}
    db.execute.assert_not_called()


def test_data_service_failure_maps_to_502(auth_settings, monkeypatch):
    def _fail(db, relation):
        raise DataServiceError("relation \"enhanced_dashboard_stats\" does not exist")

    monkeypatch.setattr(dashboard_module.data_service, "select_single", _fail)
    _override_db(MagicMock())
    try:
        client = TestClient(app)
        response = client.get("/api/v1/dashboard", headers=_headers())
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 502
    assert response.json()["detail"] == 'relation "enhanced_dashboard_stats" does not exist'


def test_list_clients_wires_filters(monkeypatch, db_session):
    captured: dict[str, object] = {}

    def _fake_list_response(db, *args):
        captured["db"] = db
        captured["args"] = args
        return {"items": [], "count": 0, "limit": 25, "offset": 5}

    monkeypatch.setattr(clients_api.clients, "list_response", _fake_list_response)

    response = clients_api.list_clients(
        agent_id="agent-1",
        search="khan",
        order_by="overall_margin",
        order_dir="desc",
        limit=25,
        offset=5,
        db=db_session,
    )

    assert response["count"] == 0
    assert captured["db"] is db_session
    assert captured["args"] == ("agent-1", "khan", "overall_margin", "desc", 25, 5)


def test_create_client_passes_admin_flag(monkeypatch, db_session, user_auth):
    captured = {}

    def _fake_create(db, payload, is_admin):
        captured["is_admin"] = is_admin
        return payload

    monkeypatch.setattr(clients_api.clients, "create", _fake_create)
    clients_api.create_client(payload=MagicMock(), db=db_session, auth=user_auth)
    assert captured["is_admin"] is False


def test_link_client_route(monkeypatch, db_session, admin_auth):
    calls = []

    def _fake_link(db, client_id, agent_id, is_admin):
        calls.append((client_id, agent_id, is_admin))
        return {"success": True}

    monkeypatch.setattr(agents_api.agents, "link_client", _fake_link)
    payload = agents_api.ClientAgentLink(client_id="7b0c5c9e-8f6a-4a8e-9c63-0d3f7c1a2b4d")
    agents_api.link_client(
        agent_id="1c7a1d52-6e0d-4d1e-a1f5-8a5d7c2e9b10", payload=payload, db=db_session, auth=admin_auth
    )
    client_id, agent_id, is_admin = calls[0]
    assert str(client_id) == "7b0c5c9e-8f6a-4a8e-9c63-0d3f7c1a2b4d"
    assert agent_id == "1c7a1d52-6e0d-4d1e-a1f5-8a5d7c2e9b10"
    assert is_admin is True


def test_create_evaluation_records_actor(monkeypatch, db_session, admin_auth):
    captured = {}

    def _fake_create(db, payload, evaluated_by, can_manage):
        captured.update(evaluated_by=evaluated_by, can_manage=can_manage)
        return {}

    monkeypatch.setattr(evaluations_api.evaluations, "create", _fake_create)
    evaluations_api.create_evaluation(payload=MagicMock(), db=db_session, auth=admin_auth)
    assert captured == {"evaluated_by": "boss@example.com", "can_manage": True}


def test_monthly_reset_service_is_built_per_request(db_session, admin_auth, user_auth):
    first = monthly_api.get_monthly_reset_service(db=db_session, auth=admin_auth)
    second = monthly_api.get_monthly_reset_service(db=db_session, auth=user_auth)
    assert first is not second
    assert first.is_admin is True
    assert first.actor == "boss@example.com"
    assert second.is_admin is False
