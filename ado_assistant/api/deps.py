"""
API dependencies for dependency injection.
"""

from typing import AsyncIterator, Optional

from fastapi import Depends, Header

from ado_assistant.clients.devops_client import AzureDevOpsClient
from ado_assistant.clients.generation_client import GenerationClient
from ado_assistant.core.security import extract_bearer_token
from ado_assistant.services.analyze_service import AnalyzeService
from ado_assistant.services.capacity_service import CapacityService
from ado_assistant.services.work_item_service import WorkItemService


class ServiceContainer:
    """
    Container for process-wide services.

    Azure DevOps clients are not held here: each request gets its own,
    bound to the caller's token.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self) -> None:
        """Initialize all services."""
        if self._initialized:
            return

        self._generation_client = GenerationClient()
        self._analyze_service = AnalyzeService(self._generation_client)

        self._initialized = True

    async def shutdown(self) -> None:
        """Release client resources."""
        if self._initialized:
            await self._generation_client.close()

    @property
    def generation_client(self) -> GenerationClient:
        """Get the generation client."""
        self.initialize()
        return self._generation_client

    @property
    def analyze_service(self) -> AnalyzeService:
        """Get the analyze service."""
        self.initialize()
        return self._analyze_service


# Singleton container instance
container = ServiceContainer.get_instance()


# Dependency functions for FastAPI
def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Caller's bearer token; 401 when missing or malformed."""
    return extract_bearer_token(authorization)


def get_analyze_service() -> AnalyzeService:
    """Get the analyze service instance."""
    return container.analyze_service


async def get_devops_client(
    token: str = Depends(get_bearer_token),
) -> AsyncIterator[AzureDevOpsClient]:
    """Per-request Azure DevOps client relaying the caller's token."""
    client = AzureDevOpsClient(token=token)
    try:
        yield client
    finally:
        await client.close()


def get_work_item_service(
    devops_client: AzureDevOpsClient = Depends(get_devops_client),
) -> WorkItemService:
    """Work item service bound to the request's client."""
    return WorkItemService(devops_client)


def get_capacity_service(
    devops_client: AzureDevOpsClient = Depends(get_devops_client),
) -> CapacityService:
    """Capacity service bound to the request's client."""
    return CapacityService(devops_client)
