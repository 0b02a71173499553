"""
Work item service: hierarchy reads and sequential create/update batches.
"""

from __future__ import annotations

from html import escape
from typing import Any, Optional, Sequence

from ado_assistant.clients.devops_client import AzureDevOpsClient
from ado_assistant.core.constants import (
    FIELD_ACCEPTANCE_CRITERIA,
    FIELD_DESCRIPTION,
    FIELD_ORIGINAL_ESTIMATE,
    FIELD_PRIORITY,
    FIELD_REMAINING_WORK,
    FIELD_RISK,
    FIELD_STORY_POINTS,
    FIELD_TEST_STEPS,
    FIELD_TITLE,
    REL_CHILD,
    REL_PARENT,
    REL_TESTS,
    RISK_VALUES,
    STORY_FIELDS,
    WorkItemType,
)
from ado_assistant.core.exceptions import BatchOperationError
from ado_assistant.core.logging import get_logger
from ado_assistant.domain.work_item import (
    NewStory,
    NewTask,
    NewTestCase,
    StoryUpdate,
    TestStep,
    WorkItemSummary,
)

logger = get_logger(__name__)


# =============================================================================
# JSON-Patch helpers
# =============================================================================


def field_op(field: str, value: Any, op: str = "add") -> dict[str, Any]:
    """One JSON-Patch operation on a work item field."""
    return {"op": op, "path": f"/fields/{field}", "value": value}


def relation_op(rel: str, url: str) -> dict[str, Any]:
    """JSON-Patch operation appending a relation."""
    return {"op": "add", "path": "/relations/-", "value": {"rel": rel, "url": url}}


def normalize_risk(risk: str | int | None) -> Optional[str]:
    """
    Map loose risk values ("High", 1, "2 - Medium") onto the Agile picklist.

    Unknown values yield None and the field is left out.
    """
    if risk is None:
        return None
    text = str(risk).strip()
    if text in RISK_VALUES.values():
        return text
    return RISK_VALUES.get(text.lower())


def render_test_steps(steps: Sequence[TestStep]) -> str:
    """
    Render steps as the XML fragment stored in ``Microsoft.VSTS.TCM.Steps``.

    Steps with an expected result are validate steps, the rest action steps.
    """
    parts = [f'<steps id="0" last="{len(steps)}">']
    for index, step in enumerate(steps, start=1):
        step_type = "ValidateStep" if step.expected_result else "ActionStep"
        parts.append(
            f'<step id="{index}" type="{step_type}">'
            f'<parameterizedString isformatted="true">{escape(step.action)}</parameterizedString>'
            f'<parameterizedString isformatted="true">{escape(step.expected_result)}</parameterizedString>'
            "<description/></step>"
        )
    parts.append("</steps>")
    return "".join(parts)


def render_acceptance_criteria(criteria: list[str] | str) -> str:
    """Acceptance criteria as HTML (the field is rich text)."""
    if isinstance(criteria, str):
        return escape(criteria).replace("\n", "<br/>")
    items = "".join(f"<li>{escape(c)}</li>" for c in criteria if c.strip())
    return f"<ul>{items}</ul>"


def child_ids(work_item: dict[str, Any]) -> list[int]:
    """Ids of hierarchy-forward (child) links of a work item."""
    ids = []
    for relation in work_item.get("relations") or []:
        if relation.get("rel") != REL_CHILD:
            continue
        url = relation.get("url", "")
        try:
            ids.append(int(url.rstrip("/").rsplit("/", 1)[-1]))
        except ValueError:
            logger.warning("Skipping relation with unexpected url", url=url)
    return ids


class WorkItemService:
    """
    Reads and writes work items on behalf of the calling user.

    Batches are written one item at a time. When an item fails, the items
    already written are reported through BatchOperationError and left in
    place upstream.
    """

    def __init__(self, devops_client: AzureDevOpsClient) -> None:
        self.devops = devops_client

    async def get_feature_stories(
        self,
        org: str,
        project: str,
        feature_id: int,
    ) -> list[WorkItemSummary]:
        """
        Child stories of a feature.

        Args:
            org: Azure DevOps organization
            project: Project name
            feature_id: Parent feature id

        Returns:
            Story summaries in link order
        """
        feature = await self.devops.get_work_item(org, project, feature_id)
        ids = child_ids(feature)
        logger.info("Fetched feature links", feature_id=feature_id, children=len(ids))

        if not ids:
            return []

        items = await self.devops.get_work_items_batch(org, project, ids, fields=STORY_FIELDS)
        return [WorkItemSummary.from_api(item) for item in items]

    async def _create_batch(
        self,
        org: str,
        project: str,
        work_item_type: WorkItemType,
        documents: list[list[dict[str, Any]]],
        failure_message: str,
        result_key: str,
    ) -> list[int]:
        created: list[int] = []
        for document in documents:
            try:
                result = await self.devops.create_work_item(
                    org, project, work_item_type.value, document
                )
            except Exception as e:
                logger.error(
                    failure_message,
                    work_item_type=work_item_type.value,
                    created=created,
                    remaining=len(documents) - len(created),
                    error=str(e),
                )
                raise BatchOperationError(failure_message, result_key, created, cause=e) from e
            created.append(int(result["id"]))

        logger.info("Created work items", work_item_type=work_item_type.value, ids=created)
        return created

    async def create_tasks(
        self,
        org: str,
        project: str,
        user_story_id: int,
        tasks: Sequence[NewTask],
    ) -> list[int]:
        """Create tasks as children of a user story; returns the new ids."""
        parent_url = self.devops.work_item_url(org, project, user_story_id)
        documents = []
        for task in tasks:
            document = [field_op(FIELD_TITLE, task.title)]
            if task.description:
                document.append(field_op(FIELD_DESCRIPTION, task.description))
            if task.estimate_hours is not None:
                document.append(field_op(FIELD_ORIGINAL_ESTIMATE, task.estimate_hours))
                document.append(field_op(FIELD_REMAINING_WORK, task.estimate_hours))
            document.append(relation_op(REL_PARENT, parent_url))
            documents.append(document)

        return await self._create_batch(
            org, project, WorkItemType.TASK, documents, "Task creation failed", "createdTasks"
        )

    async def create_test_cases(
        self,
        org: str,
        project: str,
        user_story_id: int,
        test_cases: Sequence[NewTestCase],
    ) -> list[int]:
        """Create test cases that test a user story; returns the new ids."""
        story_url = self.devops.work_item_url(org, project, user_story_id)
        documents = []
        for test_case in test_cases:
            document = [
                field_op(FIELD_TITLE, test_case.title),
                field_op(FIELD_TEST_STEPS, render_test_steps(test_case.steps)),
            ]
            if test_case.priority is not None:
                document.append(field_op(FIELD_PRIORITY, test_case.priority))
            document.append(relation_op(REL_TESTS, story_url))
            documents.append(document)

        return await self._create_batch(
            org,
            project,
            WorkItemType.TEST_CASE,
            documents,
            "Test case creation failed",
            "createdTestCases",
        )

    async def create_stories(
        self,
        org: str,
        project: str,
        feature_id: int,
        stories: Sequence[NewStory],
    ) -> list[int]:
        """Create user stories as children of a feature; returns the new ids."""
        feature_url = self.devops.work_item_url(org, project, feature_id)
        documents = []
        for story in stories:
            document = [field_op(FIELD_TITLE, story.title)]
            if story.description:
                document.append(field_op(FIELD_DESCRIPTION, story.description))
            if story.acceptance_criteria:
                document.append(
                    field_op(FIELD_ACCEPTANCE_CRITERIA, render_acceptance_criteria(story.acceptance_criteria))
                )
            if story.story_points is not None:
                document.append(field_op(FIELD_STORY_POINTS, story.story_points))
            if story.priority is not None:
                document.append(field_op(FIELD_PRIORITY, story.priority))
            risk = normalize_risk(story.risk)
            if risk is not None:
                document.append(field_op(FIELD_RISK, risk))
            document.append(relation_op(REL_PARENT, feature_url))
            documents.append(document)

        return await self._create_batch(
            org,
            project,
            WorkItemType.USER_STORY,
            documents,
            "Story creation failed",
            "createdStories",
        )

    async def update_stories(
        self,
        org: str,
        project: str,
        updates: Sequence[StoryUpdate],
    ) -> list[int]:
        """Set title and/or story points on existing stories; returns the ids updated."""
        updated: list[int] = []
        for update in updates:
            document = []
            if update.title is not None:
                document.append(field_op(FIELD_TITLE, update.title, op="replace"))
            if update.story_points is not None:
                # replace is rejected when story points were never set
                document.append(field_op(FIELD_STORY_POINTS, update.story_points, op="add"))

            try:
                await self.devops.update_work_item(org, project, update.id, document)
            except Exception as e:
                logger.error("Story update failed", work_item_id=update.id, updated=updated, error=str(e))
                raise BatchOperationError("Story update failed", "updatedStories", updated, cause=e) from e
            updated.append(update.id)

        logger.info("Updated stories", ids=updated)
        return updated
