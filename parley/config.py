"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parley.utils.platform import get_config_dir, get_data_dir

ProviderName = Literal["openai", "anthropic", "mistral_ai", "ollama", "google_gemini"]


class LLMConfig(BaseModel):
    provider: ProviderName = "openai"
    model: str = ""  # empty -> provider default
    api_key: str = ""
    base_url: str = ""  # empty -> provider default
    embedding_model: str = ""
    max_tokens: int = 1024
    temperature: float = 0.0
    timeout: float = 120.0


class AssistantConfig(BaseModel):
    instructions: str | None = None
    tool_choice: str = "auto"
    parallel_tool_calls: bool = True
    max_iterations: int | None = None
    max_run_seconds: float | None = None

    @field_validator("max_iterations")
    @classmethod
    def _positive_iterations(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_iterations must be >= 1")
        return value


class VectorSearchConfig(BaseModel):
    backend: Literal["memory", "chroma"] = "memory"
    collection_name: str = "documents"
    # chroma only: host wins, then persistent storage, else an in-process ephemeral store
    host: str = ""
    port: int = 8000
    persistent: bool = False
    persist_directory: str = ""  # empty -> <data dir>/vectors

    def get_persist_directory(self) -> Path:
        if self.persist_directory:
            return Path(self.persist_directory)
        return get_data_dir() / "vectors"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PARLEY_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    llm: LLMConfig = Field(default_factory=LLMConfig)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    vectorsearch: VectorSearchConfig = Field(default_factory=VectorSearchConfig)
    log_level: str = "INFO"
    log_json: bool = False


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("PARLEY_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # Init kwargs beat env vars in pydantic-settings, so feed YAML in as the
    # lowest-priority source instead.
    return _settings_with_yaml_defaults(yaml_data)


def _settings_with_yaml_defaults(yaml_data: dict[str, Any]) -> Settings:
    env_settings = Settings()
    if not yaml_data:
        return env_settings

    env_overrides = env_settings.model_dump(exclude_unset=True)
    merged = _deep_merge(yaml_data, env_overrides)
    return Settings.model_validate(merged)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
