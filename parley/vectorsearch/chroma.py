"""Chroma-backed vector store."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import chromadb
from chromadb.config import Settings as ChromaSettings

from parley.config import VectorSearchConfig
from parley.llm.base import LLMProvider
from parley.utils.logging import get_logger
from parley.vectorsearch.base import SearchResult, VectorSearch

log = get_logger(__name__)


class ChromaVectorSearch(VectorSearch):
    """Stores texts in a Chroma collection using cosine distance.

    Embeddings are always computed by ``llm``; Chroma's own embedding
    functions are never used.
    """

    def __init__(
        self,
        llm: LLMProvider,
        collection_name: str = "documents",
        client: Any = None,
    ) -> None:
        super().__init__(llm)
        self.collection_name = collection_name
        self._client = client if client is not None else chromadb.EphemeralClient(
            settings=ChromaSettings(anonymized_telemetry=False)
        )
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    @classmethod
    def from_config(cls, llm: LLMProvider, config: VectorSearchConfig) -> ChromaVectorSearch:
        settings = ChromaSettings(anonymized_telemetry=False)
        if config.host:
            client = chromadb.HttpClient(host=config.host, port=config.port, settings=settings)
        elif config.persistent:
            path = config.get_persist_directory()
            path.mkdir(parents=True, exist_ok=True)
            client = chromadb.PersistentClient(path=str(path), settings=settings)
        else:
            client = chromadb.EphemeralClient(settings=settings)
        log.info("chroma_connected", collection=config.collection_name, host=config.host or None)
        return cls(llm, collection_name=config.collection_name, client=client)

    def add_texts(
        self,
        texts: Sequence[str],
        ids: Sequence[str] | None = None,
        metadatas: Sequence[dict[str, Any]] | None = None,
    ) -> list[str]:
        new_ids, new_metadatas = self._prepare(texts, ids, metadatas)
        if not texts:
            return []

        self._collection.add(
            ids=new_ids,
            documents=list(texts),
            embeddings=self._embed_texts(texts),
            metadatas=_metadatas_arg(new_metadatas),
        )
        log.debug("texts_added", collection=self.collection_name, count=len(new_ids))
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
        self._collection.upsert(
            ids=new_ids,
            documents=list(texts),
            embeddings=self._embed_texts(texts),
            metadatas=_metadatas_arg(new_metadatas),
        )
        return new_ids

    def remove_texts(self, ids: Sequence[str]) -> None:
        if ids:
            self._collection.delete(ids=[str(i) for i in ids])

    def similarity_search_by_vector(self, embedding: Sequence[float], k: int = 4) -> list[SearchResult]:
        n_results = min(k, self._collection.count())
        if n_results <= 0:
            return []

        result = self._collection.query(
            query_embeddings=[list(embedding)],
            n_results=n_results,
            include=["documents", "metadatas", "distances"],
        )
        ids = result["ids"][0]
        documents = (result.get("documents") or [[]])[0]
        metadatas = (result.get("metadatas") or [[]])[0]
        distances = (result.get("distances") or [[]])[0]
        return [
            SearchResult(
                id=ids[i],
                text=documents[i] or "",
                # cosine distance -> similarity
                score=1.0 - float(distances[i]),
                metadata=dict(metadatas[i] or {}),
            )
            for i in range(len(ids))
        ]


def _metadatas_arg(metadatas: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
    # Chroma rejects empty metadata dicts
    return metadatas if any(metadatas) else None
