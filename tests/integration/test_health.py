"""Tests for health, banner and error envelope."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from src.boardsync.models import User
from tests.helpers import auth_headers

pytestmark = pytest.mark.integration


class TestHealth:
    async def test_health_reports_database(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "connected"
        assert data["environment"] == "testing"
        assert data["uptime"] >= 0
        assert "timestamp" in data

    async def test_banner_lists_endpoints(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        endpoints = response.json()["endpoints"]
        assert endpoints["projects"] == "/api/projects"
        assert endpoints["realtime"] == "/ws"


class TestErrorEnvelope:
    async def test_board_error_includes_request_id(self, client: AsyncClient, owner: User) -> None:
        response = await client.get(f"/api/projects/{uuid4()}", headers=auth_headers(owner))

        assert response.status_code == 404
        data = response.json()
        assert data["detail"] == "Project not found"
        assert data["request_id"] == response.headers["x-request-id"]

    async def test_client_request_id_is_echoed(self, client: AsyncClient) -> None:
        request_id = uuid4().hex
        response = await client.get("/api/projects", headers={"X-Request-ID": request_id})

        assert response.status_code == 401
        assert response.json()["request_id"] == request_id

    async def test_validation_error_is_400(self, client: AsyncClient, owner: User) -> None:
        response = await client.post("/api/projects", json={}, headers=auth_headers(owner))

        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)
        assert response.json()["request_id"]

    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get("/api/nope")
        assert response.status_code == 404
        assert "request_id" in response.json()
