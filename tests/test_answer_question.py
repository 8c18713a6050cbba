"""Tests for the portfolio assistant chain."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from portfolio.chains.answer_question import NO_INFORMATION_ANSWER, answer_question, build_context

DOCS = [
    {
        "id": "project-1-chunk-0",
        "content": "A retrieval system built on pgvector.",
        "metadata": {"type": "project", "title": "Graph RAG"},
        "similarity": 0.91,
    },
    {"id": "skill-2", "content": "Python", "metadata": {}, "similarity": 0.8},
]


def test_build_context_headers():
    context = build_context(DOCS)

    assert context == '[project] "Graph RAG":\nA retrieval system built on pgvector.\n\nPython'


@pytest.mark.asyncio
async def test_no_documents_returns_fallback_answer():
    with patch("portfolio.chains.answer_question.search_similar_documents", return_value=[]), patch(
        "portfolio.chains.answer_question.get_llm"
    ) as mock_llm:
        result = await answer_question("Who are you?")

    assert result == {"answer": NO_INFORMATION_ANSWER, "sources": []}
    mock_llm.assert_not_called()


@pytest.mark.asyncio
async def test_answer_uses_retrieved_context():
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=MagicMock(content="They built Graph RAG."))

    with patch(
        "portfolio.chains.answer_question.search_similar_documents", return_value=DOCS
    ) as mock_search, patch("portfolio.chains.answer_question.get_llm", return_value=llm):
        result = await answer_question("What has been built?")

    assert result["answer"] == "They built Graph RAG."
    assert [s["id"] for s in result["sources"]] == ["project-1-chunk-0", "skill-2"]
    assert result["sources"][0]["similarity"] == 0.91
    mock_search.assert_called_once_with("What has been built?", threshold=0.5, limit=5)

    messages = llm.ainvoke.call_args.args[0]
    assert "Graph RAG" in messages[1].content
    assert messages[1].content.endswith("answer the question: What has been built?")
