"""Google Gemini provider (Generative Language REST API)."""

from __future__ import annotations

from typing import Any

import httpx

from parley.config import LLMConfig
from parley.llm.base import LLMProvider, parse_json_response
from parley.llm.types import ChatResponse, EmbeddingResponse, StreamCallback
from parley.utils.logging import get_logger

log = get_logger(__name__)


class GoogleGeminiProvider(LLMProvider):
    default_model = "gemini-1.5-flash"
    default_embedding_model = "text-embedding-004"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

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
            params={"key": config.api_key} if config.api_key else None,
            timeout=config.timeout,
            transport=transport,
        )

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
        body: dict[str, Any] = {
            "contents": messages,
            "generationConfig": {
                "temperature": self._config.temperature,
                "maxOutputTokens": self._config.max_tokens,
            },
            **extra,
        }
        if tools:
            body["tools"] = [{"functionDeclarations": tools}]
            if tool_choice is not None:
                body["toolConfig"] = tool_choice
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}

        log.debug("chat_request", provider="google_gemini", model=self._model, messages=len(messages))

        resp = self._client.post(f"/models/{self._model}:generateContent", json=body)
        response = self._parse_chat(parse_json_response(resp))
        # generateContent is not incremental here; hand over the whole text at once
        if stream_callback is not None and response.chat_completion:
            stream_callback(response.chat_completion)
        return response

    def embed(self, text: str | list[str]) -> EmbeddingResponse:
        texts = [text] if isinstance(text, str) else text
        embeddings: list[list[float]] = []
        for item in texts:
            resp = self._client.post(
                f"/models/{self._embedding_model}:embedContent",
                json={"content": {"parts": [{"text": item}]}},
            )
            data = parse_json_response(resp)
            embeddings.append(data["embedding"]["values"])
        return EmbeddingResponse(embeddings=embeddings, model=self._embedding_model)

    def close(self) -> None:
        self._client.close()

    def _parse_chat(self, data: dict[str, Any]) -> ChatResponse:
        candidates = data.get("candidates") or [{}]
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []

        tool_calls = [part for part in parts if "functionCall" in part]
        texts = [part["text"] for part in parts if "text" in part]
        usage = data.get("usageMetadata") or {}

        return ChatResponse(
            role=content.get("role", "model"),
            chat_completion="".join(texts) or None,
            tool_calls=tool_calls,
            prompt_tokens=usage.get("promptTokenCount"),
            completion_tokens=usage.get("candidatesTokenCount"),
            total_tokens=usage.get("totalTokenCount"),
            model=data.get("modelVersion", self._model),
            raw=data,
        )
