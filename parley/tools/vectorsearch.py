"""Exposes a vector store to the LLM as a retrieval tool."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parley.tools.base import BaseTool, action

if TYPE_CHECKING:
    from parley.vectorsearch.base import VectorSearch


class VectorSearchTool(BaseTool):
    tool_name = "vectorsearch"

    def __init__(self, vectorsearch: VectorSearch) -> None:
        self.vectorsearch = vectorsearch

    @action(
        "Vectorsearch: Retrieves relevant document for the query",
        lambda p: (
            p.property("query", type="string", description="Query to find similar documents for", required=True),
            p.property(
                "k",
                type="integer",
                description="Number of similar documents to retrieve. Default value: 4",
            ),
        ),
    )
    def similarity_search(self, query: str, k: int = 4) -> list[dict]:
        results = self.vectorsearch.similarity_search(query, k=k)
        return [{"id": r.id, "text": r.text, "score": round(r.score, 4), "metadata": r.metadata} for r in results]
