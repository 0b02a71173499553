"""
Tests for the Azure OpenAI generation client.
"""

from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from ado_assistant.clients.generation_client import GenerationClient
from ado_assistant.core.config import AzureOpenAISettings
from ado_assistant.core.exceptions import ConfigurationError, GenerationError


def completion(content: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_config() -> AzureOpenAISettings:
    return AzureOpenAISettings(
        api_key="key",
        endpoint="https://example.openai.azure.com",
        deployment="gpt-4o",
        system_prompt="You are a software assistant",
    )


@pytest.fixture
def sdk_client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("Generated text"))
    client.close = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_generate_sends_system_and_user_messages(
    openai_config: AzureOpenAISettings,
    sdk_client: MagicMock,
) -> None:
    client = GenerationClient(config=openai_config, client=sdk_client)

    result = await client.generate("Describe the login story")

    assert result == "Generated text"
    kwargs = sdk_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["messages"] == [
        {"role": "system", "content": "You are a software assistant"},
        {"role": "user", "content": "Describe the login story"},
    ]


@pytest.mark.asyncio
async def test_missing_deployment_is_configuration_error(sdk_client: MagicMock) -> None:
    config = AzureOpenAISettings(api_key="key", endpoint="https://example.openai.azure.com", deployment="")
    client = GenerationClient(config=config, client=sdk_client)

    with pytest.raises(ConfigurationError):
        await client.generate("anything")

    sdk_client.chat.completions.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_credentials_is_configuration_error() -> None:
    config = AzureOpenAISettings(api_key="", endpoint="", deployment="gpt-4o")
    client = GenerationClient(config=config)

    with pytest.raises(ConfigurationError):
        await client.generate("anything")


@pytest.mark.asyncio
async def test_sdk_failure_becomes_generation_error(
    openai_config: AzureOpenAISettings,
    sdk_client: MagicMock,
) -> None:
    sdk_client.chat.completions.create.side_effect = OpenAIError("quota exceeded")
    client = GenerationClient(config=openai_config, client=sdk_client)

    with pytest.raises(GenerationError) as exc_info:
        await client.generate("anything")

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [SimpleNamespace(choices=[]), completion(None)])
async def test_empty_completion_is_empty_string(
    openai_config: AzureOpenAISettings,
    sdk_client: MagicMock,
    response: SimpleNamespace,
) -> None:
    sdk_client.chat.completions.create.return_value = response
    client = GenerationClient(config=openai_config, client=sdk_client)

    assert await client.generate("anything") == ""


@pytest.mark.asyncio
async def test_close_releases_sdk_client(
    openai_config: AzureOpenAISettings,
    sdk_client: MagicMock,
) -> None:
    client = GenerationClient(config=openai_config, client=sdk_client)

    await client.close()

    sdk_client.close.assert_awaited_once()
