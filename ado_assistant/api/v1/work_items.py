"""
Work item endpoints: feature hierarchy reads and batch create/update.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ado_assistant.api.deps import get_work_item_service
from ado_assistant.api.errors import failure_message
from ado_assistant.core.logging import get_logger
from ado_assistant.domain.work_item import (
    NewStory,
    NewTask,
    NewTestCase,
    StoryUpdate,
    WorkItemSummary,
)
from ado_assistant.services.work_item_service import WorkItemService

logger = get_logger(__name__)

router = APIRouter()


# Request/Response models
class ProjectScopedRequest(BaseModel):
    """Organization and project every write is scoped to."""

    model_config = ConfigDict(populate_by_name=True)

    org: str = Field(..., min_length=1, description="Azure DevOps organization")
    project: str = Field(..., min_length=1, description="Project name")


class CreateTasksRequest(ProjectScopedRequest):
    """Tasks to create under a user story."""

    user_story_id: int = Field(..., alias="userStoryId")
    tasks: list[NewTask] = Field(..., min_length=1)


class CreateTestCasesRequest(ProjectScopedRequest):
    """Test cases to create for a user story."""

    user_story_id: int = Field(..., alias="userStoryId")
    test_cases: list[NewTestCase] = Field(..., alias="testCases", min_length=1)


class CreateStoriesRequest(ProjectScopedRequest):
    """User stories to create under a feature."""

    feature_id: int = Field(..., alias="featureId")
    stories: list[NewStory] = Field(..., min_length=1)


class UpdateStoriesRequest(ProjectScopedRequest):
    """Existing stories to retitle or re-estimate."""

    stories: list[StoryUpdate] = Field(..., min_length=1)


class FeatureStoriesResponse(BaseModel):
    """Child stories of a feature."""

    stories: list[WorkItemSummary]


class BatchResponse(BaseModel):
    """Result of a batch write."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True


class CreateTasksResponse(BatchResponse):
    created_tasks: list[int] = Field(..., alias="createdTasks")


class CreateTestCasesResponse(BatchResponse):
    created_test_cases: list[int] = Field(..., alias="createdTestCases")


class CreateStoriesResponse(BatchResponse):
    created_stories: list[int] = Field(..., alias="createdStories")


class UpdateStoriesResponse(BatchResponse):
    updated_stories: list[int] = Field(..., alias="updatedStories")


@router.get(
    "/feature-stories/{org}/{project}/{feature_id}",
    response_model=FeatureStoriesResponse,
)
async def get_feature_stories(
    org: str,
    project: str,
    feature_id: int,
    service: WorkItemService = Depends(get_work_item_service),
) -> FeatureStoriesResponse:
    """Fetch the user stories linked under a feature."""
    logger.info("Fetching feature stories", org=org, project=project, feature_id=feature_id)

    with failure_message("Failed to fetch stories"):
        stories = await service.get_feature_stories(org, project, feature_id)

    return FeatureStoriesResponse(stories=stories)


@router.post("/create-tasks", response_model=CreateTasksResponse)
async def create_tasks(
    request: CreateTasksRequest,
    service: WorkItemService = Depends(get_work_item_service),
) -> CreateTasksResponse:
    """Create tasks linked to a parent user story."""
    logger.info("Creating tasks", user_story_id=request.user_story_id, count=len(request.tasks))

    with failure_message("Task creation failed"):
        ids = await service.create_tasks(
            request.org, request.project, request.user_story_id, request.tasks
        )

    return CreateTasksResponse(created_tasks=ids)


@router.post("/create-testcases", response_model=CreateTestCasesResponse)
async def create_test_cases(
    request: CreateTestCasesRequest,
    service: WorkItemService = Depends(get_work_item_service),
) -> CreateTestCasesResponse:
    """Create test cases, with steps, that test a user story."""
    logger.info(
        "Creating test cases",
        user_story_id=request.user_story_id,
        count=len(request.test_cases),
    )

    with failure_message("Test case creation failed"):
        ids = await service.create_test_cases(
            request.org, request.project, request.user_story_id, request.test_cases
        )

    return CreateTestCasesResponse(created_test_cases=ids)


@router.post("/create-stories", response_model=CreateStoriesResponse)
async def create_stories(
    request: CreateStoriesRequest,
    service: WorkItemService = Depends(get_work_item_service),
) -> CreateStoriesResponse:
    """Create user stories linked to a parent feature."""
    logger.info("Creating stories", feature_id=request.feature_id, count=len(request.stories))

    with failure_message("Story creation failed"):
        ids = await service.create_stories(
            request.org, request.project, request.feature_id, request.stories
        )

    return CreateStoriesResponse(created_stories=ids)


@router.post("/update-stories", response_model=UpdateStoriesResponse)
async def update_stories(
    request: UpdateStoriesRequest,
    service: WorkItemService = Depends(get_work_item_service),
) -> UpdateStoriesResponse:
    """Update title and/or story points of existing stories."""
    logger.info("Updating stories", count=len(request.stories))

    with failure_message("Story update failed"):
        ids = await service.update_stories(request.org, request.project, request.stories)

    return UpdateStoriesResponse(updated_stories=ids)
