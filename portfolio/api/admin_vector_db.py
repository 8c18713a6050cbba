"""Admin API endpoints for the assistant's vector store."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from portfolio.api.errors import http_error
from portfolio.core.auth_middleware import AuthContext, require_admin
from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger
from portfolio.db import vector_store
from portfolio.db.dashboard import log_activity
from portfolio.services.content_indexer import index_all_content

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/vector-db")


class VectorSearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Text to search for")
    limit: int = Field(5, ge=1, le=50)
    threshold: float | None = Field(None, ge=0.0, le=1.0, description="Defaults to SEARCH_MATCH_THRESHOLD")


@router.post("/index-all")
async def index_all(auth: AuthContext = Depends(require_admin)) -> dict[str, Any]:
    """
    Rebuild the vector store from every content source.

    The store is cleared first; sources that fail are reported in errors.
    """
    try:
        result = index_all_content()
    except Exception as e:
        raise http_error(e, "Failed to index content") from e

    log_activity("Reindexed", f"{result['count']} documents", "vector-db", auth.display_name)
    return {"success": not result["errors"], **result}


@router.get("/stats")
async def stats(auth: AuthContext = Depends(require_admin)) -> dict[str, Any]:
    try:
        return vector_store.get_vector_stats()
    except Exception as e:
        raise http_error(e, "Failed to fetch vector store statistics") from e


@router.post("/search")
async def search(
    request: VectorSearchRequest,
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query must not be empty")

    threshold = request.threshold
    if threshold is None:
        threshold = get_settings().SEARCH_MATCH_THRESHOLD

    try:
        results = vector_store.search_similar_documents(request.query, threshold, request.limit)
    except Exception as e:
        raise http_error(e, "Failed to search vector store") from e

    return {"query": request.query, "results": results, "count": len(results)}


@router.delete("/{doc_id}")
async def delete_document(
    doc_id: str = Path(..., min_length=1),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        deleted = vector_store.delete_document(doc_id)
    except Exception as e:
        raise http_error(e, "Failed to delete vector document") from e

    if not deleted:
        raise HTTPException(status_code=404, detail="Document not found")
    return {"success": True, "id": doc_id}
