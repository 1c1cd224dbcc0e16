"""Mistral AI provider (OpenAI-compatible chat API)."""

from __future__ import annotations

from parley.llm.openai import OpenAIProvider


class MistralAIProvider(OpenAIProvider):
    default_model = "mistral-large-latest"
    default_embedding_model = "mistral-embed"
    default_base_url = "https://api.mistral.ai/v1"
    # Mistral always reports usage on the last chunk and rejects stream_options
    stream_usage = False
