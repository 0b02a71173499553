"""
Route-level failure mapping.
"""

from contextlib import contextmanager
from typing import Iterator

from ado_assistant.core.exceptions import (
    AssistantError,
    BatchOperationError,
    GenerationOutputError,
    ValidationError,
)
from ado_assistant.core.logging import get_logger

logger = get_logger(__name__)

# Errors that already carry the message the caller should see
PASSTHROUGH_ERRORS = (
    BatchOperationError,
    GenerationOutputError,
    ValidationError,
)


class OperationFailedError(AssistantError):
    """A downstream call behind a route failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="OPERATION_FAILED", status_code=500)


@contextmanager
def failure_message(message: str) -> Iterator[None]:
    """
    Report any downstream failure inside the block as a fixed 500 message.

    Example:
        with failure_message("Failed to fetch stories"):
            stories = await service.get_feature_stories(...)
    """
    try:
        yield
    except PASSTHROUGH_ERRORS:
        raise
    except Exception as e:
        logger.error(message, error=str(e), error_type=type(e).__name__)
        raise OperationFailedError(message) from e
