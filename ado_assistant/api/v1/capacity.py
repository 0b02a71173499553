"""
Capacity endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from ado_assistant.api.deps import get_capacity_service
from ado_assistant.api.errors import failure_message
from ado_assistant.core.logging import get_logger
from ado_assistant.domain.work_item import CapacityResult
from ado_assistant.services.capacity_service import CapacityService

logger = get_logger(__name__)

router = APIRouter()


class ComputeCapacityRequest(BaseModel):
    """Team whose capacity to compute, and optionally which iterations."""

    org: str = Field(..., min_length=1)
    project: str = Field(..., min_length=1)
    team: str = Field(..., min_length=1)
    iterations: Optional[list[str]] = Field(
        default=None,
        validation_alias=AliasChoices("iterations", "iterationPaths"),
        description="Iteration paths to plan against, in order",
    )


@router.post("/compute-capacity", response_model=CapacityResult)
async def compute_capacity(
    request: ComputeCapacityRequest,
    service: CapacityService = Depends(get_capacity_service),
) -> CapacityResult:
    """
    Capacity of the team for the current, next and next+1 iterations.

    Explicitly requested iterations win when at least three resolve;
    otherwise the next three unfinished iterations are used.
    """
    logger.info("Computing capacity", org=request.org, project=request.project, team=request.team)

    with failure_message("Capacity computation failed"):
        return await service.compute_capacity(
            request.org,
            request.project,
            request.team,
            requested_paths=request.iterations,
        )
