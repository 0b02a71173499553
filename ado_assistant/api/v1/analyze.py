"""
Generation endpoint: prompt selection and Azure OpenAI relay.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ado_assistant.api.deps import get_analyze_service, get_bearer_token
from ado_assistant.api.errors import failure_message
from ado_assistant.core.logging import get_logger
from ado_assistant.services.analyze_service import AnalyzeService
from ado_assistant.services.prompt_builder import PromptContext

logger = get_logger(__name__)

router = APIRouter()


# Request/Response models
class AnalyzeRequest(BaseModel):
    """Request for a generated artifact."""

    title: str = Field(..., min_length=1, description="Work item title")
    action: str = Field(..., min_length=1, description="Generation action")
    description: Optional[str] = Field(default="", description="Work item description")
    type: Optional[str] = Field(default="", description="Work item type")
    capacities: dict[str, int] = Field(
        default_factory=dict,
        description="Sprint plan capacities keyed n/n1/n2",
    )
    items: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Ordered candidate items for a sprint plan",
    )
    iterations: list[str] = Field(
        default_factory=list,
        description="Names of the three planning periods",
    )


class AnalyzeResponse(BaseModel):
    """Generated text, plus parsed JSON for structured actions."""

    output: str
    data: Optional[Any] = None


@router.post("/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
async def analyze(
    request: AnalyzeRequest,
    analyze_service: AnalyzeService = Depends(get_analyze_service),
    _token: str = Depends(get_bearer_token),
) -> AnalyzeResponse:
    """
    Generate a description, acceptance criteria, test cases, bug summary,
    stories, tasks or a sprint plan for a work item.
    """
    logger.info("Received analyze request", title=request.title, type=request.type, action=request.action)

    context = PromptContext(
        title=request.title,
        description=request.description or "",
        type=request.type or "",
        capacities=request.capacities,
        items=request.items,
        iterations=request.iterations,
    )

    with failure_message("AI failure"):
        result = await analyze_service.analyze(request.action, context)

    if result.is_json:
        return AnalyzeResponse(output=result.output, data=result.data)
    return AnalyzeResponse(output=result.output)
