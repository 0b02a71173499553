"""
Health endpoints. These are open: no bearer token required.
"""

from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

from fastapi import APIRouter

from ado_assistant.core.config import AzureDevOpsSettings, AzureOpenAISettings, settings
from ado_assistant.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def missing_openai_settings(config: AzureOpenAISettings) -> list[str]:
    """Environment variables still needed before /analyze can generate."""
    missing = []
    if not config.endpoint:
        missing.append("AZURE_OPENAI_ENDPOINT")
    if not config.api_key:
        missing.append("AZURE_OPENAI_API_KEY")
    if not config.deployment:
        missing.append("AZURE_OPENAI_DEPLOYMENT_NAME")
    return missing


def devops_url_usable(config: AzureDevOpsSettings) -> bool:
    """Whether the Azure DevOps base URL is an absolute http(s) URL."""
    parsed = urlparse(config.base_url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Application status."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": _now(),
    }


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Whether outbound calls can be made.

    Generation needs endpoint, key and deployment; work item routes only need
    a usable Azure DevOps base URL since callers bring their own token.
    """
    missing = missing_openai_settings(settings.openai)
    checks = {
        "app": True,
        "azure_openai": not missing,
        "azure_devops": devops_url_usable(settings.devops),
    }

    ready = all(checks.values())
    if not ready:
        logger.warning("Not ready", checks=checks, missing=missing)

    payload: dict[str, Any] = {
        "status": "ready" if ready else "not_ready",
        "checks": checks,
        "timestamp": _now(),
    }
    if missing:
        payload["missing"] = missing
    return payload


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
