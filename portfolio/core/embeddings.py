"""OpenAI embeddings generation with validation."""

import asyncio

from openai import OpenAI

from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger

logger = get_logger(__name__)

# OpenAI accepts up to 2048 inputs per request
_MAX_BATCH = 2048


def _get_client() -> OpenAI:
    """Get OpenAI client instance."""
    settings = get_settings()
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def embed_texts(texts: list[str]) -> list[list[float]]:
    """
    Generate embeddings for a list of texts using OpenAI.

    Args:
        texts: List of text strings to embed

    Returns:
        List of embedding vectors (each vector is list of floats)

    Raises:
        ValueError: If embedding dimension doesn't match expected EMBEDDING_DIM
        Exception: If OpenAI API call fails
    """
    if not texts:
        return []

    settings = get_settings()
    client = _get_client()

    try:
        embeddings: list[list[float]] = []

        for start in range(0, len(texts), _MAX_BATCH):
            batch = texts[start : start + _MAX_BATCH]
            response = client.embeddings.create(
                model=settings.EMBEDDING_MODEL,
                input=batch,
            )

            for i, embedding_obj in enumerate(response.data):
                embedding = embedding_obj.embedding

                if len(embedding) != settings.EMBEDDING_DIM:
                    raise ValueError(
                        f"Embedding dimension mismatch for text {start + i}: "
                        f"expected {settings.EMBEDDING_DIM}, got {len(embedding)}"
                    )

                embeddings.append(embedding)

        logger.info(
            f"Generated {len(embeddings)} embeddings using {settings.EMBEDDING_MODEL}",
            extra={"extra_data": {"model": settings.EMBEDDING_MODEL, "count": len(embeddings)}},
        )

        return embeddings

    except Exception as e:
        logger.error(f"Failed to generate embeddings: {e}")
        raise


def embed_text(text: str) -> list[float]:
    """Embed a single text."""
    return embed_texts([text])[0]


async def embed_texts_async(texts: list[str]) -> list[list[float]]:
    """Async wrapper around embed_texts using thread pool."""
    return await asyncio.to_thread(embed_texts, texts)
