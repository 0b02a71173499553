"""
Capacity service: team capacity for the next three planning iterations.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ado_assistant.clients.devops_client import AzureDevOpsClient
from ado_assistant.core.constants import PLANNING_SLOTS
from ado_assistant.core.exceptions import DevOpsError
from ado_assistant.core.logging import get_logger
from ado_assistant.domain.work_item import CapacityResult
from ado_assistant.services.capacity_calculator import iteration_capacity, select_iterations

logger = get_logger(__name__)


class CapacityService:
    """
    Computes iteration capacity from Azure DevOps team settings.
    """

    def __init__(self, devops_client: AzureDevOpsClient) -> None:
        self.devops = devops_client

    async def _team_size(self, org: str, project: str, team: str) -> int:
        try:
            members = await self.devops.list_team_members(org, project, team)
        except DevOpsError as e:
            logger.warning("Could not fetch team members, assuming one", team=team, error=str(e))
            return 1
        return max(len(members), 1)

    async def compute_capacity(
        self,
        org: str,
        project: str,
        team: str,
        requested_paths: Optional[Sequence[str]] = None,
        today: Optional[date] = None,
    ) -> CapacityResult:
        """
        Capacity for the current, next and next+1 iterations.

        Args:
            org: Azure DevOps organization
            project: Project name
            team: Team name
            requested_paths: Iteration paths to plan against, if the caller has a preference
            today: Reference date for picking upcoming iterations

        Returns:
            Capacities keyed n/n1/n2 plus the iteration paths used

        Raises:
            DevOpsError: If iterations or capacities cannot be fetched
        """
        iterations = await self.devops.list_team_iterations(org, project, team)
        selected = select_iterations(iterations, requested_paths, today)
        team_size = await self._team_size(org, project, team)

        logger.info(
            "Selected planning iterations",
            team=team,
            known=len(iterations),
            selected=[it.path for it in selected],
            team_size=team_size,
        )

        capacities: dict[str, int] = {}
        for index, slot in enumerate(PLANNING_SLOTS):
            if index >= len(selected):
                capacities[slot] = 0
                continue
            iteration = selected[index]
            records = await self.devops.get_iteration_capacities(org, project, team, iteration.id)
            capacities[slot] = iteration_capacity(iteration, records, team_size)

        return CapacityResult(
            capacities=capacities,
            iterations=[it.path for it in selected],
        )
