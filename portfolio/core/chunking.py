"""Text chunking utilities for the vector indexer."""

import re
from typing import Any

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def chunk_text(
    text: str,
    max_chars: int = 1000,
    metadata: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Split text into chunks along paragraph and sentence boundaries.

    Paragraphs (separated by blank lines) are packed into a chunk until the
    next one would push it past max_chars. A paragraph that is itself longer
    than max_chars is broken into sentences which are packed the same way.
    A single sentence longer than max_chars becomes its own oversized chunk
    rather than being cut mid-sentence.

    Args:
        text: Text to chunk
        max_chars: Soft maximum characters per chunk
        metadata: Optional metadata to include in each chunk

    Returns:
        List of chunk dicts with:
            - chunk_index: int (0-based)
            - content: str
            - metadata: dict

    Raises:
        ValueError: If max_chars is not positive
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars ({max_chars}) must be positive")

    if not text or not text.strip():
        return []

    pieces: list[str] = []
    current = ""

    def flush() -> None:
        nonlocal current
        stripped = current.strip()
        if stripped:
            pieces.append(stripped)
        current = ""

    for paragraph in _PARAGRAPH_SPLIT.split(text):
        paragraph = paragraph.strip()
        if not paragraph:
            continue

        if len(paragraph) > max_chars:
            for sentence in _SENTENCE_SPLIT.split(paragraph):
                if not sentence:
                    continue
                if current and len(current) + 1 + len(sentence) > max_chars:
                    flush()
                current = f"{current} {sentence}" if current else sentence
        else:
            if current and len(current) + 2 + len(paragraph) > max_chars:
                flush()
            current = f"{current}\n\n{paragraph}" if current else paragraph

    flush()

    return [
        {
            "chunk_index": index,
            "content": content,
            "metadata": metadata or {},
        }
        for index, content in enumerate(pieces)
    ]
