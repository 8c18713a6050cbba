"""Tests for paragraph and sentence aware chunking."""

import pytest

from portfolio.core.chunking import chunk_text


def test_chunk_text_empty():
    assert chunk_text("") == []
    assert chunk_text("   \n\n  ") == []


def test_chunk_text_shorter_than_max():
    chunks = chunk_text("Short text", max_chars=100)

    assert len(chunks) == 1
    assert chunks[0]["chunk_index"] == 0
    assert chunks[0]["content"] == "Short text"


def test_paragraphs_packed_until_limit():
    """Paragraphs join with a blank line while they fit."""
    text = "a" * 40 + "\n\n" + "b" * 40 + "\n\n" + "c" * 40
    chunks = chunk_text(text, max_chars=90)

    assert [c["content"] for c in chunks] == ["a" * 40 + "\n\n" + "b" * 40, "c" * 40]


def test_exact_fit_is_kept_together():
    text = "a" * 40 + "\n\n" + "b" * 40
    chunks = chunk_text(text, max_chars=82)

    assert len(chunks) == 1


def test_long_paragraph_split_into_sentences():
    sentences = ["This is sentence number %d." % i for i in range(10)]
    paragraph = " ".join(sentences)
    chunks = chunk_text(paragraph, max_chars=60)

    assert len(chunks) > 1
    for chunk in chunks:
        assert len(chunk["content"]) <= 60
    # Sentences are rejoined with single spaces, nothing is lost
    assert " ".join(c["content"] for c in chunks) == paragraph


def test_single_oversized_sentence_is_its_own_chunk():
    text = "x" * 150
    chunks = chunk_text(text, max_chars=50)

    assert len(chunks) == 1
    assert chunks[0]["content"] == text


def test_chunk_indexes_are_sequential_and_stripped():
    text = "  first  \n\n\n  second  \n\n third "
    chunks = chunk_text(text, max_chars=8)

    assert [c["chunk_index"] for c in chunks] == [0, 1, 2]
    assert [c["content"] for c in chunks] == ["first", "second", "third"]


def test_metadata_is_attached():
    chunks = chunk_text("hello", metadata={"type": "blog"})
    assert chunks[0]["metadata"] == {"type": "blog"}


def test_invalid_max_chars():
    with pytest.raises(ValueError, match="must be positive"):
        chunk_text("text", max_chars=0)
