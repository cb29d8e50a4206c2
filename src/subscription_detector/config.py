"""Configuration management for Subscription Detector.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the SUBSCRIPTION_DETECTOR_ prefix (e.g., SUBSCRIPTION_DETECTOR_OPENAI_API_KEY).
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBSCRIPTION_DETECTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Classifier Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key. The LLM classifier is only engaged when this is set.",
    )
    openai_model: str = Field(
        default="gpt-4",
        description="Chat model used by the LLM classifier",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Optional OpenAI-compatible API base URL",
    )
    openai_timeout: float = Field(
        default=30.0,
        description="Timeout for classifier requests in seconds",
    )
    use_ai: bool = Field(
        default=True,
        description="Engage the LLM classifier when an API key is available",
    )
    classifier_fail_fast: bool = Field(
        default=False,
        description=(
            "Abort the whole batch when the classifier fails. When disabled, the "
            "failing email is skipped and the batch continues."
        ),
    )

    # Input / output
    input_path: Path = Field(
        default=Path("data/emails.json"),
        description="JSON file containing the email records to analyze",
    )
    output_path: Path = Field(
        default=Path("output/subscriptions.json"),
        description="JSON file the deduplicated subscriptions are written to",
    )

    # Gmail Configuration
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API credentials file",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to Gmail API token file",
    )
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.readonly",
        description="OAuth scope used for Gmail access",
    )
    gmail_query: str = Field(
        default="subscription OR receipt OR invoice OR trial OR renewal",
        description="Default Gmail search query used when reading emails from Gmail",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum number of retries for failed classifier calls",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0,
        description="Initial delay between classifier retries in seconds",
    )

    @property
    def ai_enabled(self) -> bool:
        """Whether the LLM classifier should be engaged."""
        return self.use_ai and bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
