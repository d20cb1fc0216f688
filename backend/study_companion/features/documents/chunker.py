"""
Documents feature: overlapping text chunks for embedding.
"""

from langchain_text_splitters import RecursiveCharacterTextSplitter

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200


class TextChunker:
    """Splits text at paragraph → line → word boundaries, hard-cutting as a last resort.

    Chunks are exact slices of the input (boundary whitespace is kept), so
    dropping each chunk's overlap with its predecessor rebuilds the text.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=["\n\n", "\n", " ", ""],
            strip_whitespace=False,
        )

    def split(self, text: str) -> list[str]:
        """Split text into ordered, non-empty chunks of at most `chunk_size` characters."""
        if not text or not text.strip():
            return []
        return [chunk for chunk in self._splitter.split_text(text) if chunk.strip()]
