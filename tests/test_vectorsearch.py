"""Tests for the vectorsearch facade."""

from unittest.mock import MagicMock

import pytest

from parley.config import VectorSearchConfig
from parley.llm import OpenAIProvider
from parley.llm.types import ChatResponse, EmbeddingResponse
from parley.vectorsearch import InMemoryVectorSearch, VectorSearch, create_vectorsearch
from parley.vectorsearch.prompts import rag_prompt

VECTORS = {
    "cats purr": [1.0, 0.0, 0.0],
    "dogs bark": [0.0, 1.0, 0.0],
    "kittens meow": [0.9, 0.1, 0.0],
    "what do cats do?": [1.0, 0.05, 0.0],
    "Cats purr when content.": [0.95, 0.0, 0.05],
}


def fake_embed(text):
    texts = [text] if isinstance(text, str) else text
    return EmbeddingResponse(embeddings=[VECTORS[t] for t in texts])


@pytest.fixture
def llm():
    llm = MagicMock(spec=OpenAIProvider)
    llm.embed.side_effect = fake_embed
    return llm


@pytest.fixture
def store(llm):
    store = InMemoryVectorSearch(llm)
    store.add_texts(["cats purr", "dogs bark", "kittens meow"], ids=["c", "d", "k"], metadatas=[{"n": 1}, {}, {}])
    return store


class TestInMemoryVectorSearch:
    def test_similarity_search_ranks_by_cosine(self, store):
        results = store.similarity_search("what do cats do?", k=2)
        assert [r.id for r in results] == ["c", "k"]
        assert results[0].score == pytest.approx(0.9988, abs=1e-3)
        assert results[0].metadata == {"n": 1}

    def test_k_larger_than_store(self, store):
        assert len(store.similarity_search_by_vector([0.0, 1.0, 0.0], k=10)) == 3

    def test_empty_store(self, llm):
        assert InMemoryVectorSearch(llm).similarity_search_by_vector([1.0, 0.0, 0.0]) == []

    def test_generated_ids(self, llm):
        ids = InMemoryVectorSearch(llm).add_texts(["cats purr"])
        assert len(ids) == 1 and ids[0]

    def test_duplicate_ids_rejected(self, store):
        with pytest.raises(ValueError, match="already present"):
            store.add_texts(["dogs bark"], ids=["d"])

    def test_mismatched_lengths(self, llm):
        with pytest.raises(ValueError):
            InMemoryVectorSearch(llm).add_texts(["cats purr"], ids=["a", "b"])

    def test_remove_texts(self, store):
        store.remove_texts(["c", "k"])
        assert len(store) == 1
        assert [r.id for r in store.similarity_search_by_vector([1.0, 0.0, 0.0])] == ["d"]

    def test_update_texts(self, store):
        store.update_texts(["dogs bark"], ids=["c"])
        assert store.similarity_search_by_vector([0.0, 1.0, 0.0], k=1)[0].id in {"c", "d"}
        assert len(store) == 3

    def test_update_texts_keeps_entries_on_bad_metadatas(self, store):
        with pytest.raises(ValueError, match="metadatas"):
            store.update_texts(["dogs bark"], ids=["c"], metadatas=[{}, {}])

        assert len(store) == 3
        assert store.similarity_search_by_vector([1.0, 0.0, 0.0], k=1)[0].metadata == {"n": 1}

    def test_update_texts_keeps_entries_when_embedding_fails(self, store, llm):
        llm.embed.side_effect = RuntimeError("provider down")

        with pytest.raises(RuntimeError):
            store.update_texts(["dogs bark"], ids=["c"])

        assert len(store) == 3
        assert store.similarity_search_by_vector([1.0, 0.0, 0.0], k=1)[0].text == "cats purr"

    def test_update_texts_replaces_in_place(self, store):
        assert store.update_texts(["dogs bark"], ids=["c"], metadatas=[{"n": 2}]) == ["c"]

        result = next(r for r in store.similarity_search_by_vector([0.0, 1.0, 0.0], k=3) if r.id == "c")
        assert result.text == "dogs bark"
        assert result.metadata == {"n": 2}
        assert len(store) == 3

    def test_default_update_validates_before_removing(self, llm):
        class RecordingStore(VectorSearch):
            def __init__(self, llm):
                super().__init__(llm)
                self.calls = []

            def add_texts(self, texts, ids=None, metadatas=None):
                self.calls.append("add")
                return list(ids or [])

            def remove_texts(self, ids):
                self.calls.append("remove")

            def similarity_search_by_vector(self, embedding, k=4):
                return []

        recording = RecordingStore(llm)
        with pytest.raises(ValueError):
            recording.update_texts(["a"], ids=["x", "y"])
        assert recording.calls == []

        recording.update_texts(["a"], ids=["x"])
        assert recording.calls == ["remove", "add"]

    def test_hyde_searches_with_generated_passage(self, store, llm):
        llm.chat.return_value = ChatResponse(role="assistant", chat_completion="Cats purr when content.")

        results = store.similarity_search_with_hyde("what do cats do?", k=1)

        assert results[0].id == "c"
        llm.embed.assert_called_with("Cats purr when content.")
        prompt = llm.chat.call_args.kwargs["messages"][0]["content"][0]["text"]
        assert "what do cats do?" in prompt

    def test_ask_uses_retrieved_context(self, store, llm):
        llm.chat.return_value = ChatResponse(
            role="assistant", chat_completion="They purr.", prompt_tokens=30, completion_tokens=3, total_tokens=33
        )

        response = store.ask("what do cats do?", k=2)

        assert response.answer == "They purr."
        assert response.context == "cats purr\n---\nkittens meow"
        assert response.total_tokens == 33
        prompt = llm.chat.call_args.kwargs["messages"][0]["content"][0]["text"]
        assert prompt == rag_prompt("what do cats do?", "cats purr\n---\nkittens meow")


class TestChromaVectorSearch:
    def test_roundtrip_with_injected_client(self, llm):
        from parley.vectorsearch.chroma import ChromaVectorSearch

        client = MagicMock()
        collection = client.get_or_create_collection.return_value
        collection.count.return_value = 2
        collection.query.return_value = {
            "ids": [["c", "k"]],
            "documents": [["cats purr", "kittens meow"]],
            "metadatas": [[{"n": 1}, None]],
            "distances": [[0.1, 0.25]],
        }
        store = ChromaVectorSearch(llm, collection_name="pets", client=client)

        store.add_texts(["cats purr"], ids=["c"])
        results = store.similarity_search_by_vector([1.0, 0.0, 0.0], k=5)

        client.get_or_create_collection.assert_called_once_with(name="pets", metadata={"hnsw:space": "cosine"})
        add_kwargs = collection.add.call_args.kwargs
        assert add_kwargs["ids"] == ["c"]
        assert add_kwargs["embeddings"] == [[1.0, 0.0, 0.0]]
        assert add_kwargs["metadatas"] is None
        assert collection.query.call_args.kwargs["n_results"] == 2
        assert [(r.id, r.score) for r in results] == [("c", pytest.approx(0.9)), ("k", pytest.approx(0.75))]
        assert results[1].metadata == {}

    def test_empty_collection_skips_query(self, llm):
        from parley.vectorsearch.chroma import ChromaVectorSearch

        client = MagicMock()
        client.get_or_create_collection.return_value.count.return_value = 0
        store = ChromaVectorSearch(llm, client=client)

        assert store.similarity_search_by_vector([1.0, 0.0, 0.0]) == []
        client.get_or_create_collection.return_value.query.assert_not_called()


class TestCreateVectorSearch:
    def test_memory_backend(self, llm):
        assert isinstance(create_vectorsearch(llm, VectorSearchConfig()), InMemoryVectorSearch)
