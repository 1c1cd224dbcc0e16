"""Ollama provider (native /api/chat endpoint)."""

from __future__ import annotations

import json
from typing import Any

import httpx

from parley.config import LLMConfig
from parley.errors import ApiError
from parley.llm.base import LLMProvider, parse_json_response
from parley.llm.types import ChatResponse, EmbeddingResponse, StreamCallback
from parley.utils.logging import get_logger

log = get_logger(__name__)


class OllamaProvider(LLMProvider):
    """Local models served by Ollama.

    Ollama returns tool calls without ids and with arguments already decoded
    into objects; both shapes are passed through untouched.
    """

    default_model = "llama3.1"
    default_embedding_model = "nomic-embed-text"
    default_base_url = "http://localhost:11434"

    def __init__(
        self,
        config: LLMConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._model = config.model or self.default_model
        self._embedding_model = config.embedding_model or self.default_embedding_model
        self._client = httpx.Client(
            base_url=(config.base_url or self.default_base_url).rstrip("/"),
            timeout=config.timeout,
            transport=transport,
        )

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        stream_callback: StreamCallback | None = None,
        tools: list[dict[str, Any]] | None = None,
        **extra: Any,
    ) -> ChatResponse:
        body: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "stream": stream_callback is not None,
            "options": {
                "temperature": self._config.temperature,
                "num_predict": self._config.max_tokens,
            },
            **extra,
        }
        if tools:
            body["tools"] = tools

        log.debug("chat_request", provider="ollama", model=self._model, messages=len(messages))

        if stream_callback is None:
            resp = self._client.post("/api/chat", json=body)
            return self._parse_chat(parse_json_response(resp))

        return self._stream_chat(body, stream_callback)

    def embed(self, text: str | list[str]) -> EmbeddingResponse:
        resp = self._client.post("/api/embed", json={"model": self._embedding_model, "input": text})
        data = parse_json_response(resp)
        return EmbeddingResponse(
            embeddings=data.get("embeddings", []),
            model=data.get("model"),
            prompt_tokens=data.get("prompt_eval_count"),
        )

    def close(self) -> None:
        self._client.close()

    def _parse_chat(self, data: dict[str, Any]) -> ChatResponse:
        msg = data.get("message", {})
        prompt_tokens = data.get("prompt_eval_count")
        completion_tokens = data.get("eval_count")
        total = None
        if prompt_tokens is not None and completion_tokens is not None:
            total = prompt_tokens + completion_tokens
        return ChatResponse(
            role=msg.get("role", "assistant"),
            chat_completion=msg.get("content") or None,
            tool_calls=msg.get("tool_calls") or [],
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total,
            model=data.get("model"),
            raw=data,
        )

    def _stream_chat(self, body: dict[str, Any], callback: StreamCallback) -> ChatResponse:
        text_parts: list[str] = []
        tool_calls: list[dict[str, Any]] = []
        final: dict[str, Any] = {}

        with self._client.stream("POST", "/api/chat", json=body) as resp:
            if resp.status_code >= 400:
                resp.read()
                parse_json_response(resp)
            for line in resp.iter_lines():
                if not line.strip():
                    continue
                chunk = json.loads(line)
                if chunk.get("error"):
                    raise ApiError(str(chunk["error"]), status_code=resp.status_code, body=chunk)
                msg = chunk.get("message", {})
                if msg.get("content"):
                    text_parts.append(msg["content"])
                    callback(msg["content"])
                tool_calls.extend(msg.get("tool_calls") or [])
                if chunk.get("done"):
                    final = chunk

        response = self._parse_chat({**final, "message": {"role": "assistant"}})
        response.chat_completion = "".join(text_parts) or None
        response.tool_calls = tool_calls
        return response
