"""Public assistant endpoint answering questions about the portfolio."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from portfolio.api.errors import http_error
from portfolio.chains.answer_question import answer_question
from portfolio.core.rate_limiter import check_rag_rate_limit

router = APIRouter()


class RagRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000, description="Visitor question")

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Query is required")
        return value


@router.post("/rag", dependencies=[Depends(check_rag_rate_limit)])
async def ask(request: RagRequest) -> dict[str, Any]:
    """
    Answer a question from indexed portfolio content.

    Returns:
        Dict with answer and sources
    """
    try:
        return await answer_question(request.query)
    except Exception as e:
        raise http_error(e, "Failed to answer question") from e
