"""
System-wide constants for the ADO AI assistant.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class MessageRole(str, Enum):
    """Message roles in a chat completion."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class PromptAction(str, Enum):
    """Generation actions understood by /analyze."""

    DESCRIPTION = "description"
    CRITERIA = "criteria"
    TESTS = "tests"
    TESTCASES = "testcases"
    BUG = "bug"
    STORIES = "stories"
    TASKS = "tasks"
    SPRINTPLAN = "sprintplan"


# Actions whose output is requested as JSON and parsed before returning
JSON_ACTIONS = frozenset(
    {
        PromptAction.TESTS,
        PromptAction.TESTCASES,
        PromptAction.STORIES,
        PromptAction.TASKS,
        PromptAction.SPRINTPLAN,
    }
)


class WorkItemType(str, Enum):
    """Azure DevOps work item types created by this service."""

    TASK = "Task"
    USER_STORY = "User Story"
    TEST_CASE = "Test Case"
    FEATURE = "Feature"


# =============================================================================
# API Constants
# =============================================================================

API_PREFIX = "/api"
APP_VERSION = "1.0.0"

# =============================================================================
# Azure DevOps Field References
# =============================================================================

FIELD_TITLE = "System.Title"
FIELD_DESCRIPTION = "System.Description"
FIELD_STATE = "System.State"
FIELD_WORK_ITEM_TYPE = "System.WorkItemType"
FIELD_STORY_POINTS = "Microsoft.VSTS.Scheduling.StoryPoints"
FIELD_ORIGINAL_ESTIMATE = "Microsoft.VSTS.Scheduling.OriginalEstimate"
FIELD_REMAINING_WORK = "Microsoft.VSTS.Scheduling.RemainingWork"
FIELD_PRIORITY = "Microsoft.VSTS.Common.Priority"
FIELD_RISK = "Microsoft.VSTS.Common.Risk"
FIELD_ACCEPTANCE_CRITERIA = "Microsoft.VSTS.Common.AcceptanceCriteria"
FIELD_TEST_STEPS = "Microsoft.VSTS.TCM.Steps"

STORY_FIELDS = [
    FIELD_TITLE,
    FIELD_DESCRIPTION,
    FIELD_STATE,
    FIELD_WORK_ITEM_TYPE,
    FIELD_STORY_POINTS,
    FIELD_PRIORITY,
    FIELD_RISK,
]

# Relation types
REL_CHILD = "System.LinkTypes.Hierarchy-Forward"
REL_PARENT = "System.LinkTypes.Hierarchy-Reverse"
REL_TESTS = "Microsoft.VSTS.Common.TestedBy-Reverse"

# workitemsbatch accepts at most 200 ids per call
BATCH_FETCH_LIMIT = 200

# Risk picklist values of the Agile process
RISK_VALUES = {
    "1": "1 - High",
    "high": "1 - High",
    "2": "2 - Medium",
    "medium": "2 - Medium",
    "3": "3 - Low",
    "low": "3 - Low",
}

# =============================================================================
# Planning Constants
# =============================================================================

# Planning periods returned by /compute-capacity, in order
PLANNING_SLOTS = ("n", "n1", "n2")
PLANNING_PERIOD_COUNT = len(PLANNING_SLOTS)
