"""Tests for the FastAPI exception handlers."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from neo_rbac.api import register_exception_handlers
from neo_rbac.core.exceptions import DuplicateRoleNameError, StoreTimeoutError


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.post("/roles")
    async def create_role():
        raise DuplicateRoleNameError(
            "Role with name 'MODERATOR' already exists", details={"constraint": "roles_name_key"}
        )

    @app.get("/slow")
    async def slow():
        raise StoreTimeoutError("Store timeout during list roles")

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="Nothing here")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("password=hunter2")

    return TestClient(app, raise_server_exceptions=False)


def test_conflict_body_is_fixed(client):
    response = client.post("/roles")

    assert response.status_code == 409
    assert response.json() == {"error": "Role with that name already exists", "code": "DuplicateRoleNameError"}
    assert "roles_name_key" not in response.text


def test_transient_error(client):
    response = client.get("/slow")

    assert response.status_code == 503
    assert response.json()["error"] == "Service temporarily unavailable"


def test_plain_http_exception_keeps_default_shape(client):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Nothing here"}


def test_unexpected_error_is_sanitized(client):
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "hunter2" not in response.text
