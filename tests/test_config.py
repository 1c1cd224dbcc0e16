"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from parley.config import AssistantConfig, Settings, VectorSearchConfig, load_settings
from parley.utils.platform import get_config_dir, get_data_dir


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PARLEY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("PARLEY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("PARLEY_CONFIG", raising=False)
    monkeypatch.delenv("PARLEY_LLM__MODEL", raising=False)
    monkeypatch.delenv("PARLEY_LLM__PROVIDER", raising=False)
    monkeypatch.delenv("PARLEY_LOG_LEVEL", raising=False)


YAML = """
llm:
  provider: anthropic
  model: claude-3-5-haiku-latest
  max_tokens: 2048
assistant:
  instructions: You are terse
  max_iterations: 8
log_level: DEBUG
"""


class TestLoadSettings:
    def test_defaults_without_file(self):
        settings = load_settings()
        assert settings.llm.provider == "openai"
        assert settings.assistant.tool_choice == "auto"
        assert settings.vectorsearch.backend == "memory"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "parley.yaml"
        path.write_text(YAML)

        settings = load_settings(path)

        assert settings.llm.provider == "anthropic"
        assert settings.llm.max_tokens == 2048
        assert settings.assistant.instructions == "You are terse"
        assert settings.assistant.max_iterations == 8
        assert settings.log_level == "DEBUG"

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "parley.yaml"
        path.write_text(YAML)
        monkeypatch.setenv("PARLEY_LLM__MODEL", "claude-3-opus-latest")

        settings = load_settings(path)

        assert settings.llm.model == "claude-3-opus-latest"
        assert settings.llm.provider == "anthropic"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "elsewhere.yaml"
        path.write_text("log_level: WARNING\n")
        monkeypatch.setenv("PARLEY_CONFIG", str(path))

        assert load_settings().log_level == "WARNING"

    def test_default_config_dir(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text("log_json: true\n")

        assert load_settings().log_json is True

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        assert load_settings(tmp_path / "absent.yaml").llm.provider == "openai"

    def test_invalid_provider(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("llm:\n  provider: skynet\n")
        with pytest.raises(ValidationError):
            load_settings(path)


class TestModels:
    def test_max_iterations_must_be_positive(self):
        with pytest.raises(ValidationError):
            AssistantConfig(max_iterations=0)

    def test_persist_directory_default(self, tmp_path):
        assert VectorSearchConfig().get_persist_directory() == tmp_path / "data" / "vectors"
        assert VectorSearchConfig(persist_directory="/srv/v").get_persist_directory().as_posix() == "/srv/v"

    def test_platform_overrides(self, tmp_path):
        assert get_config_dir() == tmp_path / "config"
        assert get_data_dir() == tmp_path / "data"

    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("PARLEY_LLM__PROVIDER", "ollama")
        assert Settings().llm.provider == "ollama"
