"""Maps provider classes to the adapter that speaks their dialect."""

from __future__ import annotations

from parley.assistant.adapters.anthropic import AnthropicAdapter
from parley.assistant.adapters.base import Adapter
from parley.assistant.adapters.gemini import GoogleGeminiAdapter
from parley.assistant.adapters.mistral import MistralAIAdapter
from parley.assistant.adapters.ollama import OllamaAdapter
from parley.assistant.adapters.openai import OpenAIAdapter
from parley.errors import ConfigurationError
from parley.llm import (
    AnthropicProvider,
    GoogleGeminiProvider,
    LLMProvider,
    MistralAIProvider,
    OllamaProvider,
    OpenAIProvider,
)

# Most specific provider class first, so subclasses win over their bases.
_REGISTRY: list[tuple[type[LLMProvider], type[Adapter]]] = []


def register_adapter(provider_cls: type[LLMProvider], adapter_cls: type[Adapter]) -> None:
    for i, (existing, _) in enumerate(_REGISTRY):
        if existing is provider_cls:
            _REGISTRY[i] = (provider_cls, adapter_cls)
            return
        if issubclass(provider_cls, existing):
            _REGISTRY.insert(i, (provider_cls, adapter_cls))
            return
    _REGISTRY.append((provider_cls, adapter_cls))


def build_adapter(llm: LLMProvider) -> Adapter:
    for provider_cls, adapter_cls in _REGISTRY:
        if isinstance(llm, provider_cls):
            return adapter_cls()
    raise ConfigurationError(f"Unsupported LLM class: {type(llm).__name__}")


register_adapter(OpenAIProvider, OpenAIAdapter)
register_adapter(MistralAIProvider, MistralAIAdapter)
register_adapter(OllamaProvider, OllamaAdapter)
register_adapter(AnthropicProvider, AnthropicAdapter)
register_adapter(GoogleGeminiProvider, GoogleGeminiAdapter)
