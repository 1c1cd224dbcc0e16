"""Similarity search and RAG over vector databases.

``ChromaVectorSearch`` lives in :mod:`parley.vectorsearch.chroma` so that
importing this package does not pull in chromadb.
"""

from parley.config import VectorSearchConfig
from parley.llm.base import LLMProvider
from parley.vectorsearch.base import AskResponse, SearchResult, VectorSearch
from parley.vectorsearch.memory import InMemoryVectorSearch

__all__ = [
    "AskResponse",
    "SearchResult",
    "VectorSearch",
    "InMemoryVectorSearch",
    "create_vectorsearch",
]


def create_vectorsearch(llm: LLMProvider, config: VectorSearchConfig) -> VectorSearch:
    if config.backend == "chroma":
        from parley.vectorsearch.chroma import ChromaVectorSearch

        return ChromaVectorSearch.from_config(llm, config)
    return InMemoryVectorSearch(llm)
