"""Configuration management for the Sparkle Studio design pipeline."""

import json
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class GeminiConfig(BaseModel):
    """Image generation service settings."""
    base_url: str = "https://generativelanguage.googleapis.com"
    image_model: str = "gemini-2.0-flash-exp"
    timeout: float = 120.0  # per-call deadline in seconds


class RetryConfig(BaseModel):
    """Retry settings for description generation."""
    max_attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=2.0, ge=0.0)  # fixed, not exponential


class VariationConfig(BaseModel):
    """Multi-view variation settings."""
    parallel: bool = True


class StudioConfig(BaseSettings):
    """Main pipeline configuration."""

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    variations: VariationConfig = Field(default_factory=VariationConfig)

    # Gemini API key (loaded from .env)
    gemini_api_key: str | None = None

    # Azure OpenAI for the text agents (loaded from .env)
    azure_openai_endpoint: str | None = None
    azure_openai_deployment: str | None = None

    # Supabase for saved designs
    supabase_url: str | None = None
    supabase_key: str | None = None
    saved_designs_table: str = "saved_designs"

    log_level: str = "INFO"
    # Comma-separated (https://a.example,https://b.example) or a JSON list
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    class Config:
        env_file = ".env"
        env_prefix = ""
        env_nested_delimiter = "__"
        extra = "ignore"


def load_config() -> StudioConfig:
    """Load configuration from environment and defaults."""
    return StudioConfig()
