"""LLM provider subpackage."""

from parley.llm.types import ChatResponse, EmbeddingResponse, StreamCallback
from parley.llm.base import LLMProvider
from parley.llm.anthropic import AnthropicProvider
from parley.llm.gemini import GoogleGeminiProvider
from parley.llm.mistral import MistralAIProvider
from parley.llm.ollama import OllamaProvider
from parley.llm.openai import OpenAIProvider
from parley.config import LLMConfig

__all__ = [
    "ChatResponse",
    "EmbeddingResponse",
    "StreamCallback",
    "LLMProvider",
    "AnthropicProvider",
    "GoogleGeminiProvider",
    "MistralAIProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "create_provider",
]

_PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "mistral_ai": MistralAIProvider,
    "ollama": OllamaProvider,
    "google_gemini": GoogleGeminiProvider,
}


def create_provider(config: LLMConfig) -> LLMProvider:
    """Factory to create the appropriate LLM provider from config."""
    return _PROVIDERS[config.provider](config)
