"""
Custom exception hierarchy for the ADO AI assistant.
Every error maps to an HTTP status and a flat ``{"error": "..."}`` body.
"""

from typing import Any, Optional


class AssistantError(Exception):
    """Base exception for all assistant errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"error": self.message, "code": self.code, **self.details}


# =============================================================================
# Configuration Errors (500)
# =============================================================================


class ConfigurationError(AssistantError):
    """Error in application configuration."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(AssistantError):
    """Request validation failed."""

    def __init__(self, message: str = "Invalid input", details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
            status_code=400,
        )


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class AuthenticationError(AssistantError):
    """Missing or malformed bearer token."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
        )


# =============================================================================
# External Service Errors (500)
# =============================================================================


class ExternalServiceError(AssistantError):
    """Error communicating with an external service."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="EXTERNAL_SERVICE_ERROR",
            details=details,
            status_code=500,
        )
        self.service_name = service_name


class DevOpsError(ExternalServiceError):
    """Azure DevOps REST call failed (non-2xx or network failure)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        super().__init__(service_name="Azure DevOps", message=message)
        self.code = "DEVOPS_ERROR"
        self.upstream_status = status_code
        self.endpoint = endpoint


class GenerationError(ExternalServiceError):
    """Azure OpenAI completion failed."""

    def __init__(self, message: str) -> None:
        super().__init__(service_name="Azure OpenAI", message=message)
        self.code = "GENERATION_ERROR"


class GenerationOutputError(ExternalServiceError):
    """Generated text could not be parsed as the requested JSON."""

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(service_name="Azure OpenAI", message=reason)
        self.message = "AI returned malformed output"
        self.reason = reason
        self.code = "MALFORMED_GENERATION"
        self.details = {"action": action}


# =============================================================================
# Batch Errors (500)
# =============================================================================


class BatchOperationError(AssistantError):
    """
    A sequential batch of work-item writes stopped part-way.

    Items written before the failure stay written upstream; their ids are
    reported under ``result_key`` so the caller can reconcile.
    """

    def __init__(
        self,
        message: str,
        result_key: str,
        completed_ids: list[int],
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=message,
            code="BATCH_PARTIAL_FAILURE",
            details={result_key: list(completed_ids)},
            status_code=500,
        )
        self.result_key = result_key
        self.completed_ids = list(completed_ids)
        self.cause = cause
