"""
Analyze service: prompt selection, generation and output parsing.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

from ado_assistant.clients.generation_client import GenerationClient
from ado_assistant.core.constants import JSON_ACTIONS
from ado_assistant.core.exceptions import GenerationOutputError
from ado_assistant.core.logging import get_logger
from ado_assistant.services.prompt_builder import PromptContext, build_prompt, parse_action

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"^\s*```[a-zA-Z]*\s*(.*?)\s*```\s*$", re.DOTALL)


@dataclass
class AnalyzeResult:
    """Generated output, plus the parsed document for JSON actions."""

    output: str
    data: Optional[Any] = None
    is_json: bool = False


def parse_json_output(action: str, text: str) -> Any:
    """
    Parse generated text that was requested as JSON.

    A single surrounding markdown fence is tolerated and stripped.

    Raises:
        GenerationOutputError: If the text is not valid JSON
    """
    candidate = text.strip()
    fenced = _FENCE_PATTERN.match(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    if not candidate:
        raise GenerationOutputError(action, "empty response")

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise GenerationOutputError(action, f"invalid JSON: {e.msg}") from e


class AnalyzeService:
    """
    Runs one generation per /analyze call.
    """

    def __init__(self, generation_client: GenerationClient) -> None:
        self.generation_client = generation_client

    async def analyze(self, action: str, context: PromptContext) -> AnalyzeResult:
        """
        Build the prompt for an action, generate, and parse JSON actions.

        Args:
            action: Action keyword (unrecognized ones prompt with the title)
            context: Request fields used by the templates

        Returns:
            Analyze result
        """
        prompt = build_prompt(action, context)
        logger.debug("Generated prompt", action=action, prompt_length=len(prompt))

        output = await self.generation_client.generate(prompt)

        resolved = parse_action(action)
        if resolved not in JSON_ACTIONS:
            return AnalyzeResult(output=output)

        try:
            data = parse_json_output(action, output)
        except GenerationOutputError as e:
            logger.warning(
                "Generation returned malformed JSON",
                action=action,
                reason=e.reason,
                output_length=len(output),
            )
            raise

        return AnalyzeResult(output=output, data=data, is_json=True)
