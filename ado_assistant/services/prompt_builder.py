"""
Maps an /analyze action and its payload to a generation prompt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ado_assistant.core.constants import PLANNING_SLOTS, PromptAction
from ado_assistant.prompts.templates import JSON_RULES, WORK_ITEM_PROMPTS


@dataclass
class PromptContext:
    """Fields of an /analyze request that feed the templates."""

    title: str
    description: str = ""
    type: str = ""
    capacities: dict[str, int] = field(default_factory=dict)
    items: list[dict[str, Any]] = field(default_factory=list)
    iterations: list[str] = field(default_factory=list)


def parse_action(action: str) -> Optional[PromptAction]:
    """Return the matching action, or None for anything unrecognized."""
    try:
        return PromptAction(action.strip().lower())
    except ValueError:
        return None


def _details(context: PromptContext) -> str:
    if not context.description:
        return ""
    return f"\nDetails:\n{context.description}\n"


def _format_items(items: list[dict[str, Any]]) -> str:
    if not items:
        return "(empty backlog)"

    lines = []
    for position, item in enumerate(items, start=1):
        points = item.get("storyPoints", item.get("points"))
        label = f"{position}. [{item.get('id', '?')}] {item.get('title', '')}".rstrip()
        if points is not None:
            label += f" ({points} pts)"
        lines.append(label)
    return "\n".join(lines)


def _period_names(iterations: list[str]) -> list[str]:
    defaults = ["Sprint N", "Sprint N+1", "Sprint N+2"]
    names = [name.replace("\\", "/").rsplit("/", 1)[-1] for name in iterations if name]
    return (names + defaults[len(names):])[: len(defaults)]


def build_prompt(action: str, context: PromptContext) -> str:
    """
    Build the generation prompt for an action.

    Unrecognized actions fall back to the bare title.
    """
    resolved = parse_action(action)
    if resolved is None:
        return context.title

    if resolved is PromptAction.SPRINTPLAN:
        names = _period_names(context.iterations)
        return WORK_ITEM_PROMPTS["sprintplan"].format(
            period_n=names[0],
            period_n1=names[1],
            period_n2=names[2],
            capacity_n=context.capacities.get(PLANNING_SLOTS[0], 0),
            capacity_n1=context.capacities.get(PLANNING_SLOTS[1], 0),
            capacity_n2=context.capacities.get(PLANNING_SLOTS[2], 0),
            items=_format_items(context.items),
            json_rules=JSON_RULES,
        ).strip()

    template_key = "tests" if resolved is PromptAction.TESTCASES else resolved.value
    return WORK_ITEM_PROMPTS[template_key].format(
        title=context.title,
        type=context.type or "work item",
        description=context.description or context.title,
        details=_details(context),
        json_rules=JSON_RULES,
    ).strip()
