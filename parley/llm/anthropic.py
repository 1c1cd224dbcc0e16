"""Anthropic LLM provider."""

from __future__ import annotations

from typing import Any

from anthropic import Anthropic

from parley.config import LLMConfig
from parley.llm.base import LLMProvider
from parley.llm.types import ChatResponse, StreamCallback
from parley.utils.logging import get_logger

log = get_logger(__name__)


class AnthropicProvider(LLMProvider):
    default_model = "claude-3-5-sonnet-latest"

    def __init__(self, config: LLMConfig, client: Anthropic | None = None) -> None:
        self._config = config
        self._model = config.model or self.default_model
        if client is None:
            kwargs: dict[str, Any] = {"api_key": config.api_key or None, "timeout": config.timeout}
            if config.base_url:
                kwargs["base_url"] = config.base_url
            client = Anthropic(**kwargs)
        self._client = client

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        stream_callback: StreamCallback | None = None,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: dict[str, Any] | None = None,
        system: str | None = None,
        **extra: Any,
    ) -> ChatResponse:
        kwargs = self._build_kwargs(messages, tools, tool_choice, system, extra)
        log.debug("chat_request", provider="anthropic", model=self._model, messages=len(messages))

        if stream_callback is None:
            response = self._client.messages.create(**kwargs)
        else:
            with self._client.messages.stream(**kwargs) as stream:
                for text in stream.text_stream:
                    stream_callback(text)
                response = stream.get_final_message()

        return self._parse_response(response)

    def close(self) -> None:
        self._client.close()

    def _build_kwargs(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        tool_choice: dict[str, Any] | None,
        system: str | None,
        extra: dict[str, Any],
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            **extra,
        }
        if system:
            kwargs["system"] = system
        if tools:
            kwargs["tools"] = tools
            if tool_choice is not None:
                kwargs["tool_choice"] = tool_choice
        return kwargs

    def _parse_response(self, response: Any) -> ChatResponse:
        result = ChatResponse(
            role=response.role,
            model=response.model,
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            raw=response,
        )

        texts: list[str] = []
        for block in response.content:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                result.tool_calls.append(
                    {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
                )
        result.chat_completion = "".join(texts) or None
        return result
