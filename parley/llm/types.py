"""LLM data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

StreamCallback = Callable[[str], None]


@dataclass
class ChatResponse:
    """One chat turn as reported by a provider.

    ``tool_calls`` stays in the vendor's native shape; the assistant adapters
    know how to read it back.
    """

    role: str | None = None
    chat_completion: str | None = None
    tool_calls: list[dict[str, Any]] = field(default_factory=list)
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    model: str | None = None
    raw: Any = None


@dataclass
class EmbeddingResponse:
    embeddings: list[list[float]] = field(default_factory=list)
    model: str | None = None
    prompt_tokens: int | None = None

    @property
    def embedding(self) -> list[float]:
        return self.embeddings[0]
