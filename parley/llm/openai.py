"""OpenAI chat-completions provider (also the base for compatible APIs)."""

from __future__ import annotations

import json
from typing import Any

import httpx

from parley.config import LLMConfig
from parley.llm.base import LLMProvider, parse_json_response
from parley.llm.types import ChatResponse, EmbeddingResponse, StreamCallback
from parley.utils.logging import get_logger

log = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    default_model = "gpt-4o-mini"
    default_embedding_model = "text-embedding-3-small"
    default_base_url = "https://api.openai.com/v1"
    # ask for a trailing usage chunk when streaming
    stream_usage = True

    def __init__(
        self,
        config: LLMConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._model = config.model or self.default_model
        self._embedding_model = config.embedding_model or self.default_embedding_model
        headers = {"Authorization": f"Bearer {config.api_key}"} if config.api_key else {}
        self._client = httpx.Client(
            base_url=(config.base_url or self.default_base_url).rstrip("/"),
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        stream_callback: StreamCallback | None = None,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | dict[str, Any] | None = None,
        parallel_tool_calls: bool | None = None,
        **extra: Any,
    ) -> ChatResponse:
        body: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            **extra,
        }
        if tools:
            body["tools"] = tools
            if tool_choice is not None:
                body["tool_choice"] = tool_choice
            if parallel_tool_calls is not None:
                body["parallel_tool_calls"] = parallel_tool_calls

        log.debug("chat_request", provider=type(self).__name__, model=self._model, messages=len(messages))

        if stream_callback is not None:
            return self._stream_chat(body, stream_callback)

        resp = self._client.post("/chat/completions", json=body)
        return self._parse_chat(parse_json_response(resp))

    def embed(self, text: str | list[str]) -> EmbeddingResponse:
        resp = self._client.post(
            "/embeddings",
            json={"model": self._embedding_model, "input": text},
        )
        data = parse_json_response(resp)
        return EmbeddingResponse(
            embeddings=[item["embedding"] for item in data.get("data", [])],
            model=data.get("model"),
            prompt_tokens=data.get("usage", {}).get("prompt_tokens"),
        )

    def close(self) -> None:
        self._client.close()

    def _parse_chat(self, data: dict[str, Any]) -> ChatResponse:
        choice = data["choices"][0]
        msg = choice.get("message", {})
        usage = data.get("usage") or {}
        return ChatResponse(
            role=msg.get("role", "assistant"),
            chat_completion=msg.get("content"),
            tool_calls=msg.get("tool_calls") or [],
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
            model=data.get("model"),
            raw=data,
        )

    def _stream_chat(self, body: dict[str, Any], callback: StreamCallback) -> ChatResponse:
        body = {**body, "stream": True}
        if self.stream_usage:
            body["stream_options"] = {"include_usage": True}
        role = "assistant"
        text_parts: list[str] = []
        # index -> partially assembled tool call
        calls: dict[int, dict[str, Any]] = {}
        usage: dict[str, Any] = {}
        model: str | None = None

        with self._client.stream("POST", "/chat/completions", json=body) as resp:
            if resp.status_code >= 400:
                resp.read()
                parse_json_response(resp)
            for line in resp.iter_lines():
                if not line.startswith("data: "):
                    continue
                payload = line[6:].strip()
                if payload == "[DONE]":
                    break
                try:
                    chunk = json.loads(payload)
                except json.JSONDecodeError:
                    log.warning("stream_chunk_undecodable", payload=payload[:200])
                    continue

                model = chunk.get("model", model)
                if chunk.get("usage"):
                    usage = chunk["usage"]
                if not chunk.get("choices"):
                    continue

                delta = chunk["choices"][0].get("delta", {})
                role = delta.get("role") or role
                text = delta.get("content")
                if text:
                    text_parts.append(text)
                    callback(text)
                for tc in delta.get("tool_calls") or []:
                    _merge_tool_call_delta(calls, tc)

        return ChatResponse(
            role=role,
            chat_completion="".join(text_parts) or None,
            tool_calls=[calls[i] for i in sorted(calls)],
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
            model=model,
        )


def _merge_tool_call_delta(calls: dict[int, dict[str, Any]], delta: dict[str, Any]) -> None:
    index = delta.get("index", len(calls))
    call = calls.setdefault(
        index,
        {"id": None, "type": "function", "function": {"name": "", "arguments": ""}},
    )
    if delta.get("id"):
        call["id"] = delta["id"]
    fn = delta.get("function") or {}
    if fn.get("name"):
        call["function"]["name"] += fn["name"]
    if fn.get("arguments"):
        call["function"]["arguments"] += fn["arguments"]
