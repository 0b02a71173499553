"""
Configuration management using Pydantic Settings.
Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_OPENAI_",
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = Field(default="", description="Azure OpenAI API key")
    endpoint: str = Field(
        default="",
        description="Azure OpenAI resource endpoint (https://<resource>.openai.azure.com)",
    )
    deployment: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "AZURE_OPENAI_DEPLOYMENT_NAME",
            "AZURE_OPENAI_DEPLOYMENT",
        ),
        description="Chat completion deployment name",
    )
    api_version: str = Field(default="2024-02-15-preview", description="Azure OpenAI API version")
    system_prompt: str = Field(
        default="You are a software assistant",
        description="System message sent with every completion",
    )
    timeout: float = Field(default=120.0, description="Request timeout in seconds")


class AzureDevOpsSettings(BaseSettings):
    """Azure DevOps REST API configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_DEVOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://dev.azure.com", description="Azure DevOps base URL")
    api_version: str = Field(default="7.0", description="REST API version")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    read_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for idempotent reads on transport failures",
    )


class SecuritySettings(BaseSettings):
    """Security configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    allowed_origins: list[str] = Field(
        default=[
            "https://dev.azure.com",
            "https://konakalla-ado.gallerycdn.vsassets.io",
        ],
        description="CORS allowed origins",
    )
    allowed_origin_regex: Optional[str] = Field(
        default=r"https://.*\.visualstudio\.com",
        description="CORS origin regex (organization-scoped visualstudio.com hosts)",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ado-ai-assistant", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=4000, description="Server port")

    # Sub-settings
    openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    devops: AzureDevOpsSettings = Field(default_factory=AzureDevOpsSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
