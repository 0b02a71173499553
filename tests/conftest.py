"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from ado_assistant.api.deps import get_analyze_service, get_bearer_token, get_devops_client
from ado_assistant.clients.devops_client import AzureDevOpsClient
from ado_assistant.clients.generation_client import GenerationClient
from ado_assistant.main import app
from ado_assistant.services.analyze_service import AnalyzeService


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(autouse=True)
def clear_overrides() -> Iterator[None]:
    """Reset dependency overrides between tests."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header of a signed-in extension user."""
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def mock_devops_client() -> MagicMock:
    """Azure DevOps client stub; async methods are AsyncMocks."""
    client = MagicMock(spec=AzureDevOpsClient)
    client.work_item_url.side_effect = (
        lambda org, project, work_item_id: f"https://dev.azure.com/{org}/{project}/_apis/wit/workItems/{work_item_id}"
    )
    return client


@pytest.fixture
def devops_override(mock_devops_client: MagicMock) -> MagicMock:
    """Route the app's Azure DevOps client to the stub, keeping the bearer check."""

    def override(token: str = Depends(get_bearer_token)) -> MagicMock:
        return mock_devops_client

    app.dependency_overrides[get_devops_client] = override
    return mock_devops_client


@pytest.fixture
def mock_generation_client() -> AsyncMock:
    """Generation client stub."""
    client = AsyncMock(spec=GenerationClient)
    client.generate.return_value = ""
    return client


@pytest.fixture
def generation_override(mock_generation_client: AsyncMock) -> AsyncMock:
    """Serve /analyze from the stubbed generation client."""
    service = AnalyzeService(mock_generation_client)
    app.dependency_overrides[get_analyze_service] = lambda: service
    return mock_generation_client
