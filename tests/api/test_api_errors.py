from __future__ import annotations

import io


def test_health_needs_no_auth(client):
    resp = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["success"] is True
    assert "timestamp" in body["data"]
    assert resp.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "API endpoint not found"}


def test_wrong_method(client):
    resp = client.delete("/api/auth/login")
    assert resp.status_code == 405
    assert resp.get_json()["success"] is False


def test_validation_errors_are_400(client):
    resp = client.post("/api/auth/register/manager", json={"name": "A"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_unexpected_errors_hide_details(client, container, monkeypatch):
    def boom(*_args, **_kwargs):
        raise RuntimeError("connection refused to 10.0.0.5")

    monkeypatch.setattr(container.auth_service, "login", boom)

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1", "role": "manager"})
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}


def test_oversized_request_is_rejected(client, container):
    token = container.auth_service.register_employee(
        name="Bob",
        email="bob@x.com",
        password="secret2",
        manager_code=container.auth_service.register_manager(
            name="Alice", email="alice@x.com", password="secret1"
        ).team.manager_code,
    ).token

    too_big = container.files.policy.max_request_size + 1
    resp = client.post(
        "/api/daily-work",
        data={
            "work_date": "2024-05-10",
            "work_description": "x",
            "files": [(io.BytesIO(b"x" * too_big), "big.txt", "text/plain")],
        },
        content_type="multipart/form-data",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 400
    assert "too large" in resp.get_json()["message"]
