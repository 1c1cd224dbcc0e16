"""Prompt templates for retrieval-augmented generation."""

HYDE_PROMPT = """Please write a passage to answer the question

Question: {question}

Passage:"""

RAG_PROMPT = """Context:
{context}
---
Question: {question}
---
Answer:"""

CONTEXT_SEPARATOR = "\n---\n"


def hyde_prompt(question: str) -> str:
    return HYDE_PROMPT.format(question=question)


def rag_prompt(question: str, context: str) -> str:
    return RAG_PROMPT.format(question=question, context=context)
