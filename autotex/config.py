"""Configuration management using Pydantic Settings.

Priority order:
1. Environment variables (highest priority)
2. .env file (local development fallback)
3. Defaults below, which match a stock local Ollama install
"""

import json
from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_MODELS = ["llama3.2", "llama2", "codellama", "mistral"]


class Settings(BaseSettings):
    """Application settings.

    Configuration is loaded from:
    1. Environment variables (highest priority)
    2. .env file (local development fallback)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ollama server
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_fallback_models: Annotated[list[str], NoDecode] = DEFAULT_MODELS
    ollama_health_timeout: float = 5.0
    ollama_generate_timeout: float | None = None  # None = wait for the server

    # Sampling (fixed for every conversion)
    ollama_temperature: float = 0.3
    ollama_top_p: float = 0.9
    ollama_repeat_penalty: float = 1.1

    # Preview
    mathjax_url: str = "https://cdnjs.cloudflare.com/ajax/libs/mathjax/3.2.2/es5/tex-mml-chtml.js"

    # Export
    download_filename: str = "document.tex"

    log_level: str = "INFO"

    @field_validator("ollama_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Endpoint paths are appended with a leading slash."""
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_case_level(cls, value: str) -> str:
        """logging only accepts upper-case level names."""
        return value.upper()

    @field_validator("ollama_fallback_models", mode="before")
    @classmethod
    def split_model_list(cls, value: object) -> object:
        """Accept a comma-separated string as well as a JSON list."""
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @property
    def default_models(self) -> list[str]:
        """Fallback model set, always containing the configured default model."""
        models = list(self.ollama_fallback_models) or list(DEFAULT_MODELS)
        if self.ollama_model not in models:
            models.insert(0, self.ollama_model)
        return models


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Default settings instance
settings = get_settings()
