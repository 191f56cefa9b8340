"""
Tests for health, readiness and metrics endpoints.
"""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from docsearch.app import create_app

from .conftest import make_settings


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "docsearch"
    assert "timestamp" in data


def test_health_uses_app_settings(repository, fake_reader):
    app = create_app(make_settings(SERVICE_NAME="wiki-search"), repository=repository, reader=fake_reader)

    with TestClient(app) as client:
        assert client.get("/health").json()["service"] == "wiki-search"


def test_ready(client):
    response = client.get("/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["ready"] is True
    assert data["checks"]["document_store"]["backend"] == "memory"


def test_not_ready_when_store_unhealthy(fake_reader):
    repository = AsyncMock()
    repository.backend_name = "mock"
    repository.health_check.return_value = {"status": "unhealthy", "backend": "mock"}
    app = create_app(make_settings(), repository=repository, reader=fake_reader)

    with TestClient(app) as client:
        response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["ready"] is False


def test_metrics(client):
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "docsearch_http_requests_total" in response.text
    assert 'endpoint="/health"' in response.text


def test_metrics_use_route_templates(client):
    client.get("/documents/some-id")

    text = client.get("/metrics").text

    assert 'endpoint="/documents/{document_id}"' in text
    assert 'endpoint="/documents/some-id"' not in text
