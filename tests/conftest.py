"""Shared fixtures."""

from unittest.mock import MagicMock

import pytest

from parley.llm import AnthropicProvider, GoogleGeminiProvider, OllamaProvider, OpenAIProvider


@pytest.fixture
def openai_llm():
    return MagicMock(spec=OpenAIProvider)


@pytest.fixture
def anthropic_llm():
    return MagicMock(spec=AnthropicProvider)


@pytest.fixture
def gemini_llm():
    return MagicMock(spec=GoogleGeminiProvider)


@pytest.fixture
def ollama_llm():
    return MagicMock(spec=OllamaProvider)
