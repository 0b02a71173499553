"""
Work item and iteration domain models.

These mirror the parts of Azure DevOps payloads the assistant reads. Nothing
here is persisted; Azure DevOps stays the system of record.
"""

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ado_assistant.core.constants import (
    FIELD_DESCRIPTION,
    FIELD_PRIORITY,
    FIELD_RISK,
    FIELD_STATE,
    FIELD_STORY_POINTS,
    FIELD_TITLE,
    FIELD_WORK_ITEM_TYPE,
)


def parse_api_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO timestamp such as ``2024-01-08T00:00:00Z`` to a calendar date."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


class Iteration(BaseModel):
    """A team iteration (sprint) with an inclusive date range."""

    id: str = Field(..., description="Iteration identifier (GUID)")
    name: str = Field(default="", description="Display name")
    path: str = Field(..., description="Iteration path, e.g. Project\\Sprint 5")
    start_date: date
    finish_date: date

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Optional["Iteration"]:
        """
        Build from a teamsettings/iterations entry.

        Returns None for iterations without both dates; they cannot be
        planned against.
        """
        attributes = data.get("attributes") or {}
        start = parse_api_date(attributes.get("startDate"))
        finish = parse_api_date(attributes.get("finishDate"))
        if start is None or finish is None:
            return None
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            path=data.get("path") or data.get("name", ""),
            start_date=start,
            finish_date=finish,
        )


class DaysOff(BaseModel):
    """A member's days-off range (inclusive)."""

    start: date
    end: date


class MemberCapacity(BaseModel):
    """Capacity record for one team member in one iteration."""

    member: str = Field(default="", description="Team member display name")
    capacity_per_day: list[float] = Field(
        default_factory=list,
        description="Capacity per day, one entry per activity",
    )
    days_off: list[DaysOff] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MemberCapacity":
        """Build from a teamsettings capacities entry."""
        member = data.get("teamMember") or {}
        activities = data.get("activities") or []
        days_off = []
        for entry in data.get("daysOff") or []:
            start = parse_api_date(entry.get("start"))
            end = parse_api_date(entry.get("end"))
            if start and end:
                days_off.append(DaysOff(start=start, end=end))
        return cls(
            member=member.get("displayName", ""),
            capacity_per_day=[float(a.get("capacityPerDay") or 0) for a in activities],
            days_off=days_off,
        )


class CapacityResult(BaseModel):
    """Capacities for the current and the next two planning periods."""

    model_config = ConfigDict(populate_by_name=True)

    capacities: dict[str, int] = Field(default_factory=dict)
    iterations: list[str] = Field(default_factory=list)


class WorkItemSummary(BaseModel):
    """Story fields returned to the extension."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = ""
    description: str = ""
    story_points: Optional[float] = Field(default=None, alias="storyPoints")
    priority: Optional[int] = None
    risk: Optional[str] = None
    state: Optional[str] = None
    work_item_type: Optional[str] = Field(default=None, alias="workItemType")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WorkItemSummary":
        """Build from a work item payload with a ``fields`` map."""
        fields = data.get("fields") or {}
        return cls(
            id=int(data["id"]),
            title=fields.get(FIELD_TITLE, ""),
            description=fields.get(FIELD_DESCRIPTION) or "",
            story_points=fields.get(FIELD_STORY_POINTS),
            priority=fields.get(FIELD_PRIORITY),
            risk=fields.get(FIELD_RISK),
            state=fields.get(FIELD_STATE),
            work_item_type=fields.get(FIELD_WORK_ITEM_TYPE),
        )


# =============================================================================
# Inputs for work item creation and update
# =============================================================================


class NewTask(BaseModel):
    """A task to create under a user story."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    estimate_hours: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("estimateHours", "estimate", "estimate_hours"),
    )


class TestStep(BaseModel):
    """One action/expected-result pair of a test case."""

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(..., min_length=1)
    expected_result: str = Field(
        default="",
        validation_alias=AliasChoices("expectedResult", "expected", "expected_result"),
    )


class NewTestCase(BaseModel):
    """A test case to create for a user story."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    steps: list[TestStep] = Field(default_factory=list)
    priority: Optional[int] = Field(default=None, ge=1, le=4)


class NewStory(BaseModel):
    """A user story to create under a feature."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    acceptance_criteria: Union[list[str], str, None] = Field(
        default=None,
        validation_alias=AliasChoices("acceptanceCriteria", "acceptance_criteria"),
    )
    story_points: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("storyPoints", "story_points"),
    )
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    risk: Union[str, int, None] = None


class StoryUpdate(BaseModel):
    """Title and/or story points to set on an existing story."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: Optional[str] = Field(default=None, min_length=1)
    story_points: Optional[float] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("storyPoints", "story_points"),
    )

    @model_validator(mode="after")
    def check_has_changes(self) -> "StoryUpdate":
        if self.title is None and self.story_points is None:
            raise ValueError("story update needs a title or storyPoints")
        return self
