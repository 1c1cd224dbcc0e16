"""In-process vector store backed by a numpy matrix."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from parley.llm.base import LLMProvider
from parley.utils.logging import get_logger
from parley.vectorsearch.base import SearchResult, VectorSearch

log = get_logger(__name__)


class InMemoryVectorSearch(VectorSearch):
    """Brute-force cosine similarity; fine for a few thousand texts."""

    def __init__(self, llm: LLMProvider) -> None:
        super().__init__(llm)
        self._ids: list[str] = []
        self._texts: list[str] = []
        self._metadatas: list[dict[str, Any]] = []
        self._vectors: np.ndarray | None = None

    def __len__(self) -> int:
        return len(self._ids)

    def add_texts(
        self,
        texts: Sequence[str],
        ids: Sequence[str] | None = None,
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> list[str]:
        new_ids, new_metadatas = self._prepare(texts, ids, metadatas)
        duplicates = set(new_ids) & set(self._ids)
        if duplicates:
            raise ValueError(f"Ids already present: {', '.join(sorted(duplicates))}")
        if not texts:
            return []

        self._append(new_ids, texts, new_metadatas, self._embed_matrix(texts))
        log.debug("texts_added", count=len(new_ids), total=len(self._ids))
        return new_ids

    def update_texts(
        self,
        texts: Sequence[str],
        ids: Sequence[str],
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> list[str]:
        new_ids, new_metadatas = self._prepare(texts, ids, metadatas)
        if not texts:
            return []

        # Embed first: a provider error must leave the old rows untouched
        vectors = self._embed_matrix(texts)
        self.remove_texts(new_ids)
        self._append(new_ids, texts, new_metadatas, vectors)
        log.debug("texts_updated", count=len(new_ids), total=len(self._ids))
        return new_ids

    def remove_texts(self, ids: Sequence[str]) -> None:
        doomed = {str(i) for i in ids}
        keep = [i for i, text_id in enumerate(self._ids) if text_id not in doomed]
        self._ids = [self._ids[i] for i in keep]
        self._texts = [self._texts[i] for i in keep]
        self._metadatas = [self._metadatas[i] for i in keep]
        if self._vectors is not None:
            self._vectors = self._vectors[keep] if keep else None

    def similarity_search_by_vector(self, embedding: Sequence[float], k: int = 4) -> list[SearchResult]:
        if self._vectors is None or k <= 0:
            return []

        query = _normalize(np.asarray([embedding], dtype=np.float32))[0]
        scores = self._vectors @ query
        top = np.argsort(-scores, kind="stable")[: min(k, len(self._ids))]
        return [
            SearchResult(
                id=self._ids[i],
                text=self._texts[i],
                score=float(scores[i]),
                metadata=dict(self._metadatas[i]),
            )
            for i in top
        ]

    def _embed_matrix(self, texts: Sequence[str]) -> np.ndarray:
        vectors = _normalize(np.asarray(self._embed_texts(texts), dtype=np.float32))
        if self._vectors is not None and vectors.shape[1] != self._vectors.shape[1]:
            raise ValueError(
                f"Embedding dimension {vectors.shape[1]} does not match store dimension "
                f"{self._vectors.shape[1]}"
            )
        return vectors

    def _append(
        self,
        ids: list[str],
        texts: Sequence[str],
        metadatas: list[dict[str, Any]],
        vectors: np.ndarray,
    ) -> None:
        self._vectors = vectors if self._vectors is None else np.vstack([self._vectors, vectors])
        self._ids.extend(ids)
        self._texts.extend(texts)
        self._metadatas.extend(metadatas)


def _normalize(vectors: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return vectors / norms
