"""
Tests for work item document helpers.
"""

import pytest

from ado_assistant.core.constants import REL_CHILD
from ado_assistant.domain.work_item import TestStep
from ado_assistant.services.work_item_service import (
    child_ids,
    normalize_risk,
    render_acceptance_criteria,
    render_test_steps,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("High", "1 - High"),
        (" medium ", "2 - Medium"),
        (3, "3 - Low"),
        ("2 - Medium", "2 - Medium"),
        ("critical", None),
        (None, None),
    ],
)
def test_normalize_risk(raw, expected) -> None:
    assert normalize_risk(raw) == expected


class TestRenderTestSteps:
    """Tests for render_test_steps."""

    def test_step_types_follow_expected_result(self) -> None:
        steps = [
            TestStep(action="Open page", expected_result="Page shown"),
            TestStep(action="Wait"),
        ]

        xml = render_test_steps(steps)

        assert xml.startswith('<steps id="0" last="2">')
        assert '<step id="1" type="ValidateStep">' in xml
        assert '<step id="2" type="ActionStep">' in xml
        assert xml.endswith("</steps>")

    def test_escapes_markup(self) -> None:
        xml = render_test_steps([TestStep(action='Type "a & b"', expected_result="<b>ok</b>")])

        assert "Type &quot;a &amp; b&quot;" in xml
        assert "&lt;b&gt;ok&lt;/b&gt;" in xml


def test_acceptance_criteria_text_keeps_line_breaks() -> None:
    assert render_acceptance_criteria("Given a user\nWhen <x>") == "Given a user<br/>When &lt;x&gt;"


def test_acceptance_criteria_list_skips_blank_entries() -> None:
    assert render_acceptance_criteria(["One", "  ", "Two"]) == "<ul><li>One</li><li>Two</li></ul>"


def test_child_ids_ignores_other_links_and_bad_urls() -> None:
    work_item = {
        "relations": [
            {"rel": REL_CHILD, "url": "https://dev.azure.com/contoso/_apis/wit/workItems/21"},
            {"rel": "System.LinkTypes.Hierarchy-Reverse", "url": "https://dev.azure.com/x/workItems/1"},
            {"rel": REL_CHILD, "url": "https://dev.azure.com/contoso/_apis/wit/workItems/abc"},
            {"rel": REL_CHILD, "url": "https://dev.azure.com/contoso/_apis/wit/workItems/22/"},
        ]
    }

    assert child_ids(work_item) == [21, 22]


def test_child_ids_without_relations() -> None:
    assert child_ids({"id": 7, "relations": None}) == []
