"""
Azure OpenAI chat-completion client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from openai import AsyncAzureOpenAI, OpenAIError

from ado_assistant.core.config import AzureOpenAISettings, settings
from ado_assistant.core.constants import MessageRole
from ado_assistant.core.exceptions import ConfigurationError, GenerationError
from ado_assistant.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Message:
    """A message in a chat completion request."""

    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to API format."""
        return {"role": self.role.value, "content": self.content}


class GenerationClient:
    """
    Single-shot chat completions against an Azure OpenAI deployment.

    The SDK client is created lazily so the service can start (and serve
    work item routes) without OpenAI credentials configured.
    """

    def __init__(
        self,
        config: Optional[AzureOpenAISettings] = None,
        client: Optional[AsyncAzureOpenAI] = None,
    ) -> None:
        """
        Initialize the generation client.

        Args:
            config: Azure OpenAI settings (defaults to application settings)
            client: Pre-built SDK client, mainly for tests
        """
        self.config = config or settings.openai
        self._client = client

    @property
    def deployment(self) -> str:
        """Configured deployment name."""
        if not self.config.deployment:
            raise ConfigurationError(
                "Missing Azure OpenAI deployment name. Set AZURE_OPENAI_DEPLOYMENT_NAME."
            )
        return self.config.deployment

    def _get_client(self) -> AsyncAzureOpenAI:
        if self._client is None:
            if not self.config.endpoint or not self.config.api_key:
                raise ConfigurationError(
                    "Azure OpenAI is not configured. Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
                )
            self._client = AsyncAzureOpenAI(
                api_key=self.config.api_key,
                api_version=self.config.api_version,
                azure_endpoint=self.config.endpoint,
                timeout=self.config.timeout,
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Run one completion for a user prompt.

        Args:
            prompt: User prompt text

        Returns:
            The first choice's message content, or "" when the model returned none

        Raises:
            ConfigurationError: If the deployment or credentials are missing
            GenerationError: If the completion call fails
        """
        deployment = self.deployment
        client = self._get_client()

        messages = [
            Message(role=MessageRole.SYSTEM, content=self.config.system_prompt),
            Message(role=MessageRole.USER, content=prompt),
        ]

        try:
            completion = await client.chat.completions.create(
                model=deployment,
                messages=[m.to_dict() for m in messages],
            )
        except OpenAIError as e:
            logger.error("Azure OpenAI generate error", deployment=deployment, error=str(e))
            raise GenerationError(str(e)) from e

        if not completion.choices:
            return ""
        content = completion.choices[0].message.content
        return content if isinstance(content, str) else ""

    async def close(self) -> None:
        """Close the underlying SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
