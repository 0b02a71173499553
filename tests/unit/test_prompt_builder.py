"""
Unit tests for prompt selection.
"""

import pytest

from ado_assistant.core.constants import PromptAction
from ado_assistant.services.prompt_builder import PromptContext, build_prompt, parse_action


class TestParseAction:
    """Tests for parse_action."""

    def test_known_actions(self) -> None:
        for action in PromptAction:
            assert parse_action(action.value) is action

    def test_case_and_whitespace_tolerated(self) -> None:
        assert parse_action(" Stories ") is PromptAction.STORIES

    def test_unknown_action(self) -> None:
        assert parse_action("summarize") is None


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_description_mentions_type_and_title(self) -> None:
        prompt = build_prompt("description", PromptContext(title="Add login", type="User Story"))
        assert "User Story" in prompt
        assert "Add login" in prompt

    def test_criteria_asks_for_line_separated_points(self) -> None:
        prompt = build_prompt("criteria", PromptContext(title="Add login"))
        assert "Add login" in prompt
        assert "own line" in prompt

    def test_bug_contains_description(self) -> None:
        prompt = build_prompt(
            "bug",
            PromptContext(title="Crash", description="Login crashes on null user"),
        )
        assert "Login crashes on null user" in prompt

    @pytest.mark.parametrize("action", ["tests", "testcases"])
    def test_test_case_actions_share_json_shape(self, action: str) -> None:
        prompt = build_prompt(action, PromptContext(title="Add login"))
        assert '"testCases"' in prompt
        assert '"expectedResult"' in prompt
        assert "JSON only" in prompt
        assert "code fences" in prompt

    def test_stories_prompt_constraints(self) -> None:
        prompt = build_prompt("stories", PromptContext(title="Checkout", description="Pay by card"))
        assert "at most 10 story points" in prompt
        assert '"dependsOn"' in prompt
        assert '"risk"' in prompt
        assert "Pay by card" in prompt

    def test_tasks_prompt(self) -> None:
        prompt = build_prompt("tasks", PromptContext(title="Reset password"))
        assert "Reset password" in prompt
        assert '"tasks"' in prompt

    def test_sprintplan_lists_items_in_order_with_capacities(self) -> None:
        context = PromptContext(
            title="Plan",
            capacities={"n": 20, "n1": 18, "n2": 25},
            items=[
                {"id": 7, "title": "Login", "storyPoints": 5},
                {"id": 3, "title": "Logout", "storyPoints": 2},
            ],
            iterations=["Contoso\\Sprint 4", "Contoso\\Sprint 5", "Contoso\\Sprint 6"],
        )
        prompt = build_prompt("sprintplan", context)

        assert "- Sprint 4: 20" in prompt
        assert "- Sprint 5: 18" in prompt
        assert "- Sprint 6: 25" in prompt
        assert prompt.index("[7] Login (5 pts)") < prompt.index("[3] Logout (2 pts)")
        assert "Do not reorder" in prompt
        assert "Do not split" in prompt
        assert '"unallocated"' in prompt

    def test_sprintplan_default_period_names(self) -> None:
        prompt = build_prompt("sprintplan", PromptContext(title="Plan"))
        assert "Sprint N+2: 0" in prompt
        assert "(empty backlog)" in prompt

    def test_unknown_action_returns_title(self) -> None:
        assert build_prompt("whatever", PromptContext(title="Add login")) == "Add login"
