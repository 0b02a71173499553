"""
Azure DevOps REST client.

One instance per inbound request: it carries the caller's bearer token and
relays it unchanged on every call.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ado_assistant.core.config import settings
from ado_assistant.core.constants import BATCH_FETCH_LIMIT
from ado_assistant.core.exceptions import DevOpsError
from ado_assistant.core.logging import get_logger
from ado_assistant.domain.work_item import Iteration, MemberCapacity

logger = get_logger(__name__)

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


def _segment(value: str | int) -> str:
    """Quote a single URL path segment (project and team names contain spaces)."""
    return quote(str(value), safe="")


class AzureDevOpsClient:
    """
    Thin authenticated wrapper over the work item tracking and work APIs.

    Reads retry transport-level failures; writes are sent exactly once so a
    retried create can never duplicate a work item.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        read_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Caller's bearer token, relayed as-is
            base_url: Azure DevOps base URL (defaults to settings)
            api_version: REST api-version query parameter
            timeout: Request timeout in seconds
            read_attempts: Attempts for idempotent reads
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.token = token
        self.base_url = (base_url or settings.devops.base_url).rstrip("/")
        self.api_version = api_version or settings.devops.api_version
        self.timeout = timeout or settings.devops.timeout
        self.read_attempts = read_attempts or settings.devops.read_attempts
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        endpoint: str,
        data: Any,
        params: dict[str, Any],
        headers: Optional[dict[str, str]],
        retry_reads: bool,
    ) -> httpx.Response:
        client = await self._get_client()
        if not retry_reads:
            return await client.request(method, endpoint, json=data, params=params, headers=headers)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.read_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        return await retrying(
            client.request, method, endpoint, json=data, params=params, headers=headers
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        retry_reads: bool = False,
    ) -> dict[str, Any]:
        """
        Make a request against the Azure DevOps REST API.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL
            data: JSON body
            params: Extra query parameters (api-version is always added)
            headers: Extra headers
            retry_reads: Retry transport failures (idempotent calls only)

        Returns:
            Parsed JSON body ({} for empty responses)

        Raises:
            DevOpsError: On non-2xx responses or network failures
        """
        query = {"api-version": self.api_version, **(params or {})}

        try:
            response = await self._send(method, endpoint, data, query, headers, retry_reads)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Azure DevOps request failed",
                method=method,
                endpoint=endpoint,
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
            )
            raise DevOpsError(
                message=f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                endpoint=endpoint,
            ) from e
        except httpx.RequestError as e:
            logger.error(
                "Azure DevOps request error",
                method=method,
                endpoint=endpoint,
                error=str(e),
            )
            raise DevOpsError(message=f"Request failed: {e}", endpoint=endpoint) from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            # An expired or invalid token gets a 203 with the HTML sign-in page
            logger.error(
                "Azure DevOps returned a non-JSON body",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                content_type=response.headers.get("Content-Type"),
            )
            raise DevOpsError(
                message=f"Unexpected non-JSON response (HTTP {response.status_code})",
                status_code=response.status_code,
                endpoint=endpoint,
            ) from e

    # -------------------------------------------------------------------------
    # Work items
    # -------------------------------------------------------------------------

    async def get_work_item(
        self,
        org: str,
        project: str,
        work_item_id: int,
        expand: str = "relations",
    ) -> dict[str, Any]:
        """Fetch one work item, by default with its relations."""
        endpoint = f"/{_segment(org)}/{_segment(project)}/_apis/wit/workitems/{_segment(work_item_id)}"
        return await self._request(
            "GET", endpoint, params={"$expand": expand}, retry_reads=True
        )

    async def get_work_items_batch(
        self,
        org: str,
        project: str,
        ids: Sequence[int],
        fields: Optional[Sequence[str]] = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch many work items by id.

        The batch endpoint caps each call at 200 ids, so larger lists are
        split and the results concatenated in order.
        """
        endpoint = f"/{_segment(org)}/{_segment(project)}/_apis/wit/workitemsbatch"
        items: list[dict[str, Any]] = []

        for offset in range(0, len(ids), BATCH_FETCH_LIMIT):
            body: dict[str, Any] = {"ids": list(ids[offset:offset + BATCH_FETCH_LIMIT])}
            if fields:
                body["fields"] = list(fields)
            result = await self._request("POST", endpoint, data=body, retry_reads=True)
            items.extend(result.get("value", []))

        return items

    async def create_work_item(
        self,
        org: str,
        project: str,
        work_item_type: str,
        patch_document: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Create a work item from a JSON-Patch document."""
        endpoint = (
            f"/{_segment(org)}/{_segment(project)}/_apis/wit/workitems/"
            f"{quote('$' + work_item_type, safe='$')}"
        )
        return await self._request(
            "POST",
            endpoint,
            data=patch_document,
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )

    async def update_work_item(
        self,
        org: str,
        project: str,
        work_item_id: int,
        patch_document: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Apply a JSON-Patch document to an existing work item."""
        endpoint = f"/{_segment(org)}/{_segment(project)}/_apis/wit/workitems/{_segment(work_item_id)}"
        return await self._request(
            "PATCH",
            endpoint,
            data=patch_document,
            headers={"Content-Type": JSON_PATCH_CONTENT_TYPE},
        )

    def work_item_url(self, org: str, project: str, work_item_id: int) -> str:
        """API URL of a work item, as used in relation links."""
        return (
            f"{self.base_url}/{_segment(org)}/{_segment(project)}"
            f"/_apis/wit/workItems/{_segment(work_item_id)}"
        )

    # -------------------------------------------------------------------------
    # Teams and iterations
    # -------------------------------------------------------------------------

    async def list_team_iterations(self, org: str, project: str, team: str) -> list[Iteration]:
        """Team iterations that carry both a start and a finish date."""
        endpoint = f"/{_segment(org)}/{_segment(project)}/{_segment(team)}/_apis/work/teamsettings/iterations"
        result = await self._request("GET", endpoint, retry_reads=True)

        iterations = []
        for entry in result.get("value", []):
            iteration = Iteration.from_api(entry)
            if iteration is not None:
                iterations.append(iteration)
        return iterations

    async def get_iteration_capacities(
        self,
        org: str,
        project: str,
        team: str,
        iteration_id: str,
    ) -> list[MemberCapacity]:
        """Per-member capacity records for one iteration."""
        endpoint = (
            f"/{_segment(org)}/{_segment(project)}/{_segment(team)}"
            f"/_apis/work/teamsettings/iterations/{_segment(iteration_id)}/capacities"
        )
        result = await self._request("GET", endpoint, retry_reads=True)

        # 7.x returns {"teamMembers": [...]}, older versions {"value": [...]}
        entries = result.get("teamMembers")
        if entries is None:
            entries = result.get("value", [])
        return [MemberCapacity.from_api(entry) for entry in entries]

    async def list_team_members(self, org: str, project: str, team: str) -> list[dict[str, Any]]:
        """Members of a team."""
        endpoint = f"/{_segment(org)}/_apis/projects/{_segment(project)}/teams/{_segment(team)}/members"
        result = await self._request("GET", endpoint, retry_reads=True)
        return result.get("value", [])

    async def __aenter__(self) -> "AzureDevOpsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
