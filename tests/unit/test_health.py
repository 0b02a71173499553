"""
Unit tests for health endpoints.
"""

import pytest
from httpx import AsyncClient

from ado_assistant.api.v1.health import devops_url_usable
from ado_assistant.core.config import AzureDevOpsSettings, settings


@pytest.mark.asyncio
async def test_health_check(async_client: AsyncClient) -> None:
    """Test basic health check endpoint."""
    response = await async_client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["app"] == "ado-ai-assistant"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_readiness_reports_outbound_configuration(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/health/ready")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] in {"ready", "not_ready"}
    assert set(data["checks"]) == {"app", "azure_openai", "azure_devops"}


@pytest.mark.asyncio
async def test_liveness_check(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


@pytest.mark.asyncio
async def test_health_needs_no_token(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/health", headers={"Authorization": "Basic abc"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_root_endpoint(async_client: AsyncClient) -> None:
    """Test root endpoint."""
    response = await async_client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "ado-ai-assistant"
    assert data["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_response_carries_request_id(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/health/live")
    assert response.headers["X-Request-ID"].startswith("req_")


@pytest.mark.asyncio
async def test_readiness_lists_missing_openai_settings(
    async_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings.openai, "endpoint", "https://example.openai.azure.com")
    monkeypatch.setattr(settings.openai, "api_key", "key")
    monkeypatch.setattr(settings.openai, "deployment", None)

    response = await async_client.get("/api/health/ready")

    data = response.json()
    assert data["status"] == "not_ready"
    assert data["checks"]["azure_openai"] is False
    assert data["missing"] == ["AZURE_OPENAI_DEPLOYMENT_NAME"]


@pytest.mark.asyncio
async def test_readiness_when_configured(
    async_client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings.openai, "endpoint", "https://example.openai.azure.com")
    monkeypatch.setattr(settings.openai, "api_key", "key")
    monkeypatch.setattr(settings.openai, "deployment", "gpt-4o")
    monkeypatch.setattr(settings.devops, "base_url", "https://dev.azure.com")

    response = await async_client.get("/api/health/ready")

    data = response.json()
    assert data["status"] == "ready"
    assert "missing" not in data


@pytest.mark.parametrize(
    ("base_url", "usable"),
    [
        ("https://dev.azure.com", True),
        ("http://tfs.local:8080/tfs", True),
        ("dev.azure.com", False),
        ("", False),
    ],
)
def test_devops_url_usable(base_url: str, usable: bool) -> None:
    assert devops_url_usable(AzureDevOpsSettings(base_url=base_url)) is usable
