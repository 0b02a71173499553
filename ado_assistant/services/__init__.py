"""
Service layer implementations.
"""

from ado_assistant.services.analyze_service import AnalyzeResult, AnalyzeService
from ado_assistant.services.capacity_service import CapacityService
from ado_assistant.services.prompt_builder import PromptContext, build_prompt
from ado_assistant.services.work_item_service import WorkItemService

__all__ = [
    "AnalyzeService",
    "AnalyzeResult",
    "CapacityService",
    "PromptContext",
    "build_prompt",
    "WorkItemService",
]
