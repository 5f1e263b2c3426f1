"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CLASSIFIER_MODEL = "claude-sonnet-4-5-20250929"


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    anthropic_api_key: str | None = Field(
        default=None, validation_alias="ANTHROPIC_API_KEY"
    )
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    classifier_model: str = Field(
        default=DEFAULT_CLASSIFIER_MODEL,
        validation_alias="CHAINBENCH_CLASSIFIER_MODEL",
    )
    max_tokens: int = Field(default=4096, validation_alias="CHAINBENCH_MAX_TOKENS", gt=0)

    def api_key_for_provider(self, provider: str) -> str | None:
        """Return the API key for a provider identifier."""
        keys = {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "google": self.gemini_api_key,
        }
        return keys.get(provider) or None


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
