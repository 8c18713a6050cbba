"""Vector store operations backed by the vector_store table and match_vectors RPC."""

from typing import Any

from portfolio.core.embeddings import embed_text, embed_texts
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)


def store_document(doc_id: str, content: str, metadata: dict[str, Any] | None = None) -> None:
    """Embed content and upsert it under doc_id."""
    store_documents([{"id": doc_id, "content": content, "metadata": metadata or {}}])


def store_documents(documents: list[dict[str, Any]]) -> int:
    """
    Embed and upsert a batch of documents.

    Args:
        documents: Dicts with id, content and metadata

    Returns:
        Number of documents stored
    """
    if not documents:
        return 0

    embeddings = embed_texts([doc["content"] for doc in documents])
    rows = [
        {
            "id": doc["id"],
            "content": doc["content"],
            "metadata": doc.get("metadata") or {},
            "embedding": embedding,
        }
        for doc, embedding in zip(documents, embeddings, strict=True)
    ]

    execute_query(
        lambda: get_supabase().table("vector_store").upsert(rows),
        "store",
        "vector documents",
        {"count": len(rows)},
    )
    logger.info(f"Stored {len(rows)} vector documents")
    return len(rows)


def search_similar_documents(
    query: str,
    threshold: float = 0.7,
    limit: int = 5,
) -> list[dict[str, Any]]:
    """
    Find documents similar to query via the match_vectors RPC.

    Returns:
        Rows with id, content, metadata and similarity, best match first
    """
    if not query or not query.strip():
        return []

    embedding = embed_text(query)
    response = execute_query(
        lambda: get_supabase().rpc(
            "match_vectors",
            {
                "query_embedding": embedding,
                "match_threshold": threshold,
                "match_count": limit,
            },
        ),
        "search",
        "vector documents",
        {"threshold": threshold, "limit": limit},
    )
    return response.data or []


def delete_document(doc_id: str) -> bool:
    response = execute_query(
        lambda: get_supabase().table("vector_store").delete().eq("id", doc_id),
        "delete",
        f"vector document {doc_id}",
    )
    return bool(response.data)


def list_document_ids() -> list[str]:
    response = execute_query(
        lambda: get_supabase().table("vector_store").select("id").order("id"),
        "fetch",
        "vector document IDs",
    )
    return [row["id"] for row in response.data or []]


def clear_documents() -> int:
    """Delete every stored document; returns how many were removed."""
    response = execute_query(
        lambda: get_supabase().table("vector_store").delete().neq("id", ""),
        "delete",
        "vector documents",
    )
    removed = len(response.data or [])
    logger.info(f"Cleared {removed} vector documents")
    return removed


def get_vector_stats() -> dict[str, Any]:
    """Document totals, overall and per metadata type."""
    response = execute_query(
        lambda: get_supabase().table("vector_store").select("id, metadata", count="exact"),
        "fetch",
        "vector store statistics",
    )
    by_type: dict[str, int] = {}
    for row in response.data or []:
        doc_type = (row.get("metadata") or {}).get("type") or "unknown"
        by_type[doc_type] = by_type.get(doc_type, 0) + 1

    total = response.count if response.count is not None else len(response.data or [])
    return {"total_documents": total, "by_type": by_type}
