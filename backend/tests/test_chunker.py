"""
Unit tests for TextChunker size/overlap behaviour.
"""

import string

from study_companion.features.documents.chunker import TextChunker


def unbroken_text(length: int) -> str:
    """Text without any separator, so every split is a hard character cut."""
    alphabet = string.ascii_letters + string.digits
    return "".join(alphabet[(i * 7 + i // 62) % len(alphabet)] for i in range(length))


class TestShortText:
    def test_short_text_is_single_chunk(self):
        text = "A short paragraph about cells."
        assert TextChunker().split(text) == [text]

    def test_empty_text_has_no_chunks(self):
        assert TextChunker().split("") == []
        assert TextChunker().split("   \n\n ") == []


class TestLongText:
    def test_hard_cuts_overlap_by_200(self):
        text = unbroken_text(2600)
        chunks = TextChunker().split(text)

        assert len(chunks) > 1
        assert all(len(c) <= 1000 for c in chunks)
        for previous, current in zip(chunks, chunks[1:]):
            assert current[:200] == previous[-200:]

    def test_removing_overlap_reconstructs_text(self):
        text = unbroken_text(3100)
        chunks = TextChunker().split(text)

        rebuilt = chunks[0] + "".join(c[200:] for c in chunks[1:])
        assert rebuilt == text

    def test_prefers_paragraph_boundaries(self):
        paragraphs = [("word " * 150).strip() for _ in range(4)]  # ~750 chars each
        text = "\n\n".join(paragraphs)
        chunks = TextChunker().split(text)

        assert [c.strip() for c in chunks] == paragraphs
        assert "".join(chunks) == text

    def test_prose_overlaps_by_200_and_reconstructs(self):
        text = " ".join(f"word{i}" for i in range(600))
        chunks = TextChunker().split(text)

        assert len(chunks) > 1
        assert all(len(c) <= 1000 for c in chunks)
        for previous, current in zip(chunks, chunks[1:]):
            assert current[:200] == previous[-200:]
        assert chunks[0] + "".join(c[200:] for c in chunks[1:]) == text

    def test_no_empty_chunks_and_deterministic(self):
        text = ("Sentence one. " * 120 + "\n\n") * 5
        first = TextChunker().split(text)
        second = TextChunker().split(text)

        assert first == second
        assert all(c.strip() for c in first)
        assert all(len(c) <= 1000 for c in first)
