"""Vendor-specific conversation messages."""

from parley.assistant.messages.base import Message, StandardRole
from parley.assistant.messages.anthropic import AnthropicMessage
from parley.assistant.messages.gemini import GoogleGeminiMessage
from parley.assistant.messages.mistral import MistralAIMessage
from parley.assistant.messages.ollama import OllamaMessage
from parley.assistant.messages.openai import OpenAIMessage

__all__ = [
    "Message",
    "StandardRole",
    "AnthropicMessage",
    "GoogleGeminiMessage",
    "MistralAIMessage",
    "OllamaMessage",
    "OpenAIMessage",
]
