"""
Portfolio Assistant Chain - Answers visitor questions from indexed content.

Retrieves the closest documents through match_vectors and asks the chat model
to answer strictly from them.
"""

from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from portfolio.core.config import get_settings
from portfolio.core.llm import get_llm
from portfolio.core.logging import get_logger
from portfolio.db.vector_store import search_similar_documents

logger = get_logger(__name__)

NO_INFORMATION_ANSWER = (
    "I don't have specific information about that in my knowledge base. "
    "Could you ask something else about the portfolio, projects, or skills?"
)

SYSTEM_PROMPT = (
    "You are an AI assistant for a personal portfolio website. You provide helpful, "
    "accurate, and concise information about the owner's projects, skills, experience, "
    "and content based on the provided context. If the information isn't in the context, "
    "say you don't have that specific information rather than making something up. "
    "Always maintain a professional, friendly tone."
)


def build_context(documents: list[dict[str, Any]]) -> str:
    """Render retrieved documents as blocks headed '[type] "title":'."""
    blocks = []
    for doc in documents:
        metadata = doc.get("metadata") or {}
        header = " ".join(
            part
            for part in (
                f"[{metadata['type']}]" if metadata.get("type") else "",
                f'"{metadata["title"]}"' if metadata.get("title") else "",
            )
            if part
        )
        blocks.append(f"{header}:\n{doc.get('content', '')}" if header else doc.get("content", ""))
    return "\n\n".join(blocks)


async def answer_question(query: str) -> dict[str, Any]:
    """
    Answer a visitor question from the vector store.

    Args:
        query: The visitor's question

    Returns:
        Dict with answer and the sources it was grounded on
    """
    settings = get_settings()

    documents = search_similar_documents(
        query,
        threshold=settings.RAG_MATCH_THRESHOLD,
        limit=settings.RAG_MATCH_COUNT,
    )
    if not documents:
        logger.info("No matching documents for assistant question")
        return {"answer": NO_INFORMATION_ANSWER, "sources": []}

    user_prompt = f"""Context information is below.
---------------------
{build_context(documents)}
---------------------
Given the context information and not prior knowledge, answer the question: {query}"""

    messages = [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=user_prompt)]
    response = await get_llm().ainvoke(messages)

    logger.info(
        f"Answered assistant question from {len(documents)} documents",
        extra={"extra_data": {"documents": len(documents)}},
    )

    return {
        "answer": response.content,
        "sources": [
            {
                "id": doc.get("id"),
                "content": doc.get("content"),
                "metadata": doc.get("metadata") or {},
                "similarity": doc.get("similarity"),
            }
            for doc in documents
        ],
    }
