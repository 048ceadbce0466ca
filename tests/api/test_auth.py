"""
Integration tests for the authentication endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from teafarm.api.main import app
from teafarm.services.repository import reset_repository

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_repository():
    reset_repository()


def _login(username="admin", password="admin123"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_success():
    response = _login()
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["username"] == "admin"
    assert data["user"]["role"] == "ADMIN"


def test_login_worker():
    response = _login("user", "user123")
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "WORKER"


def test_login_wrong_password():
    response = _login(password="wrong")
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_login_unknown_user():
    response = _login(username="ghost")
    assert response.status_code == 401


def test_login_missing_fields():
    response = client.post("/api/auth/login", json={"username": "admin"})
    assert response.status_code == 422
    assert "password" in response.json()["message"]


def test_me_returns_current_user():
    token = _login().json()["token"]
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "admin"


def test_me_without_token():
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


def test_me_with_garbage_token():
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


def test_logout_revokes_token():
    token = _login().json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been revoked"


def test_new_login_after_logout_gets_fresh_token():
    first = _login().json()["token"]
    client.post("/api/auth/logout", headers={"Authorization": f"Bearer {first}"})

    second = _login().json()["token"]

    assert second != first
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {second}"})
    assert response.status_code == 200


def test_health_check_is_public():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
