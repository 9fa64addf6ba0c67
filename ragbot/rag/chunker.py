"""Word-count text chunking for the RAG pipeline.

Chunks are a purely mechanical split: no overlap and no sentence awareness.
"""
from typing import List
import structlog

from ragbot import config

logger = structlog.get_logger()


class WordChunker:
    """Splits text into consecutive chunks of at most `chunk_size` words."""

    def __init__(self, chunk_size: int = None):
        """Initialize the chunker.

        Args:
            chunk_size: Words per chunk (default from config)
        """
        self.chunk_size = config.CHUNK_SIZE if chunk_size is None else chunk_size

        if self.chunk_size < 1:
            raise ValueError(f"Chunk size must be >= 1, got {self.chunk_size}")

    def chunk_text(self, text: str) -> List[str]:
        """Split text into word-count chunks.

        Args:
            text: Text to chunk

        Returns:
            Chunks in source order, each words joined by single spaces
        """
        words = text.split() if text else []
        if not words:
            return []

        chunks = []
        buffer: List[str] = []

        for word in words:
            buffer.append(word)
            if len(buffer) >= self.chunk_size:
                chunks.append(" ".join(buffer))
                buffer = []

        if buffer:
            chunks.append(" ".join(buffer))

        logger.info(
            "text_chunked",
            word_count=len(words),
            chunk_count=len(chunks),
            chunk_size=self.chunk_size,
        )

        return chunks

    def get_chunk_stats(self, chunks: List[str]) -> dict:
        """Get word-count statistics about a set of chunks."""
        if not chunks:
            return {
                "chunk_count": 0,
                "total_words": 0,
                "min_chunk_words": 0,
                "max_chunk_words": 0,
            }

        sizes = [len(c.split()) for c in chunks]

        return {
            "chunk_count": len(chunks),
            "total_words": sum(sizes),
            "min_chunk_words": min(sizes),
            "max_chunk_words": max(sizes),
        }


def chunk_text(text: str, size: int = config.CHUNK_SIZE) -> List[str]:
    """Chunk text into pieces of `size` words (convenience function)."""
    return WordChunker(chunk_size=size).chunk_text(text)
