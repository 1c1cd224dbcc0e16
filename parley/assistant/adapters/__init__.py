"""Provider adapters for the assistant run loop."""

from parley.assistant.adapters.base import Adapter, ToolCallRequest
from parley.assistant.adapters.anthropic import AnthropicAdapter
from parley.assistant.adapters.gemini import GoogleGeminiAdapter
from parley.assistant.adapters.mistral import MistralAIAdapter
from parley.assistant.adapters.ollama import OllamaAdapter
from parley.assistant.adapters.openai import OpenAIAdapter
from parley.assistant.adapters.registry import build_adapter, register_adapter

__all__ = [
    "Adapter",
    "ToolCallRequest",
    "AnthropicAdapter",
    "GoogleGeminiAdapter",
    "MistralAIAdapter",
    "OllamaAdapter",
    "OpenAIAdapter",
    "build_adapter",
    "register_adapter",
]
