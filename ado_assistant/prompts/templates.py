"""
Prompt templates for work item generation.

Templates use ``str.format`` placeholders; literal JSON braces are doubled.
"""

JSON_RULES = """
Rules:
- Respond with JSON only.
- Do not wrap the JSON in markdown code fences.
- Use the field names exactly as shown.
"""

WORK_ITEM_PROMPTS = {
    "description": """
Write a clear, professional description for the following Azure DevOps {type}.

Title: {title}
{details}
The description should explain the purpose, the expected behaviour and the
value delivered. Keep it concise and free of implementation trivia.
""",

    "criteria": """
Generate acceptance criteria for: {title}
{details}
Write each criterion as a separate, testable point on its own line.
Do not number the lines and do not add any introduction or summary.
""",

    "tests": """
Create test cases for: {title}
{details}
Each test case has a title and ordered steps; every step has an action and
an expected result.

Return this JSON shape:
{{
  "testCases": [
    {{
      "title": "string",
      "steps": [
        {{ "action": "string", "expectedResult": "string" }}
      ]
    }}
  ]
}}
{json_rules}""",

    "bug": """
Summarize the following bug report professionally. State the observed
behaviour, the expected behaviour and the likely impact.

Bug report:
{description}
""",

    "stories": """
Break the following feature into user stories.

Feature: {title}
{details}
Each story must be independent, estimable and at most 10 story points.
Rank stories in delivery order. Priority is an integer from 1 (highest) to 4.
Risk is one of "High", "Medium" or "Low". "dependsOn" holds the rank of a
story this one depends on, or null.

Return this JSON shape:
{{
  "stories": [
    {{
      "rank": 1,
      "title": "string",
      "description": "string",
      "acceptanceCriteria": ["string"],
      "storyPoints": 3,
      "priority": 2,
      "risk": "Medium",
      "dependsOn": null
    }}
  ]
}}
{json_rules}""",

    "tasks": """
Break the following user story into implementation tasks.

User story: {title}
{details}
Each task has a short title, a description and an estimate in hours.

Return this JSON shape:
{{
  "tasks": [
    {{ "title": "string", "description": "string", "estimateHours": 4 }}
  ]
}}
{json_rules}""",

    "sprintplan": """
Allocate the following ordered backlog across three sprints.

Sprints and their capacity in story points:
- {period_n}: {capacity_n}
- {period_n1}: {capacity_n1}
- {period_n2}: {capacity_n2}

Backlog, highest priority first:
{items}

Rules for allocation:
- Keep the backlog order. Do not reorder items.
- Do not split an item across sprints.
- Fill {period_n} first, then {period_n1}, then {period_n2}.
- The allocated points of a sprint must not exceed its capacity.
- Items that do not fit go to "unallocated".

Return this JSON shape:
{{
  "sprints": [
    {{
      "name": "string",
      "capacity": 0,
      "allocatedPoints": 0,
      "items": [ {{ "id": 0, "title": "string", "storyPoints": 0 }} ]
    }}
  ],
  "unallocated": [ {{ "id": 0, "title": "string", "storyPoints": 0 }} ]
}}
{json_rules}""",
}
