"""LLM provider abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import tiktoken

from parley.errors import ApiError
from parley.llm.types import ChatResponse, EmbeddingResponse, StreamCallback


class LLMProvider(ABC):
    """A blocking chat client for one vendor.

    ``chat`` receives the keyword parameters produced by the matching
    assistant adapter (``messages`` plus any of ``tools``, ``tool_choice``,
    ``system``, ``parallel_tool_calls``).
    """

    default_model: str = ""

    @abstractmethod
    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        stream_callback: StreamCallback | None = None,
        **params: Any,
    ) -> ChatResponse: ...

    def embed(self, text: str | list[str]) -> EmbeddingResponse:
        raise NotImplementedError(f"{type(self).__name__} does not support embeddings")

    def count_tokens(self, text: str) -> int:
        return len(_tokenizer().encode(text))

    def close(self) -> None:
        """Clean up resources. Override if needed."""

    def __enter__(self) -> LLMProvider:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


_ENCODING: tiktoken.Encoding | None = None


def _tokenizer() -> tiktoken.Encoding:
    global _ENCODING
    if _ENCODING is None:
        _ENCODING = tiktoken.get_encoding("cl100k_base")
    return _ENCODING


def parse_json_response(resp: httpx.Response) -> dict[str, Any]:
    """Decode a vendor JSON body, raising ApiError when it reports an error."""
    try:
        data = resp.json()
    except ValueError:
        resp.raise_for_status()
        raise ApiError(
            f"Non-JSON response from {resp.request.url}", status_code=resp.status_code, body=resp.text
        )

    error = data.get("error") if isinstance(data, dict) else None
    if error:
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise ApiError(message, status_code=resp.status_code, body=data)

    resp.raise_for_status()
    return data
