"""Common interface over vector databases."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from parley.assistant.assistant import Assistant
from parley.llm.base import LLMProvider
from parley.llm.types import StreamCallback
from parley.utils.logging import get_logger
from parley.vectorsearch.prompts import CONTEXT_SEPARATOR, hyde_prompt, rag_prompt

log = get_logger(__name__)


@dataclass
class SearchResult:
    id: str
    text: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AskResponse:
    """An answer produced from retrieved context."""

    answer: str | None
    context: str
    results: list[SearchResult]
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class VectorSearch(ABC):
    """A store of embedded texts searchable by similarity.

    Texts are embedded with ``llm.embed``; ``ask`` and the HyDE search also
    use ``llm`` for completions, through an :class:`Assistant` so that any
    supported provider works.
    """

    def __init__(self, llm: LLMProvider) -> None:
        self.llm = llm

    @abstractmethod
    def add_texts(
        self,
        texts: Sequence[str],
        ids: Sequence[str] | None = None,
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> list[str]:
        """Embed and store ``texts``; returns their ids."""

    def update_texts(
        self,
        texts: Sequence[str],
        ids: Sequence[str],
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> list[str]:
        """Replace the stored entries for ``ids``.

        Inputs are validated before anything is removed. Backends that embed
        inside ``add_texts`` should override this so that a failed embedding
        call leaves the old entries in place.
        """
        self._prepare(texts, ids, metadatas)
        self.remove_texts(ids)
        return self.add_texts(texts, ids=ids, metadatas=metadatas)

    @abstractmethod
    def remove_texts(self, ids: Sequence[str]) -> None: ...

    @abstractmethod
    def similarity_search_by_vector(self, embedding: Sequence[float], k: int = 4) -> list[SearchResult]: ...

    def similarity_search(self, query: str, k: int = 4) -> list[SearchResult]:
        embedding = self.llm.embed(query).embedding
        return self.similarity_search_by_vector(embedding, k=k)

    def similarity_search_with_hyde(self, query: str, k: int = 4) -> list[SearchResult]:
        """Search with a hypothetical answer to ``query`` instead of the query itself.

        https://arxiv.org/abs/2212.10496
        """
        assistant = Assistant(self.llm)
        assistant.add_message_and_run(hyde_prompt(query))
        passage = assistant.messages[-1].content or query
        log.debug("hyde_passage", chars=len(passage))
        return self.similarity_search(passage, k=k)

    def ask(
        self,
        question: str,
        k: int = 4,
        stream_callback: StreamCallback | None = None,
    ) -> AskResponse:
        results = self.similarity_search(question, k=k)
        context = CONTEXT_SEPARATOR.join(result.text for result in results)

        assistant = Assistant(self.llm, stream_callback=stream_callback)
        assistant.add_message_and_run(rag_prompt(question, context))
        log.info("vectorsearch_ask", results=len(results), tokens=assistant.total_tokens)

        return AskResponse(
            answer=assistant.messages[-1].content,
            context=context,
            results=results,
            prompt_tokens=assistant.total_prompt_tokens,
            completion_tokens=assistant.total_completion_tokens,
            total_tokens=assistant.total_tokens,
        )

    def _embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        embeddings = self.llm.embed(list(texts)).embeddings
        if len(embeddings) != len(texts):
            raise ValueError(f"Expected {len(texts)} embeddings, provider returned {len(embeddings)}")
        return embeddings

    @staticmethod
    def _prepare(
        texts: Sequence[str],
        ids: Sequence[str] | None,
        metadatas: Sequence[dict[str, Any]] | None,
    ) -> tuple[list[str], list[dict[str, Any]]]:
        if ids is not None and len(ids) != len(texts):
            raise ValueError(f"Got {len(texts)} texts but {len(ids)} ids")
        if metadatas is not None and len(metadatas) != len(texts):
            raise ValueError(f"Got {len(texts)} texts but {len(metadatas)} metadatas")
        resolved_ids = [str(i) for i in ids] if ids is not None else [str(uuid.uuid4()) for _ in texts]
        resolved_meta = [dict(m) for m in metadatas] if metadatas is not None else [{} for _ in texts]
        return resolved_ids, resolved_meta
