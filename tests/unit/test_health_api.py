"""Tests for shared/api/health.py"""

import pytest
from unittest.mock import MagicMock, patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shared.api.health import router


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


class TestReadRoot:

    def test_health_check(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "service": "TaekUp Backend", "version": "1.0.0"}


class TestDatabaseHealth:

    @patch("shared.api.health.get_db_manager")
    def test_db_healthy(self, mock_get_manager, client):
        mock_manager = MagicMock()
        mock_manager.health_check.return_value = True
        mock_get_manager.return_value = mock_manager

        resp = client.get("/health/db")
        assert resp.json() == {"status": "ok", "database": "connected"}

    @patch("shared.api.health.get_db_manager")
    def test_db_unhealthy(self, mock_get_manager, client):
        mock_manager = MagicMock()
        mock_manager.health_check.return_value = False
        mock_get_manager.return_value = mock_manager

        resp = client.get("/health/db")
        assert resp.json() == {"status": "error", "database": "connection_failed"}

    @patch("shared.api.health.get_db_manager")
    def test_db_exception(self, mock_get_manager, client):
        mock_get_manager.side_effect = RuntimeError("cannot connect")

        resp = client.get("/health/db")
        assert resp.status_code == 200
        assert resp.json()["status"] == "error"
        assert "cannot connect" in resp.json()["database"]
