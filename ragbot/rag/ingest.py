"""Training pipeline: chunk, embed, persist.

Chunks are embedded one at a time in source order. A chunk that fails to
embed is skipped and reported; the rest of the run continues. The store is
always overwritten with whatever records were produced.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional
import structlog

from ragbot.exceptions import ContentUnavailable, EmbeddingFailed
from ragbot.rag.chunker import WordChunker
from ragbot.rag.embedder import EmbeddingClient, TaskType
from ragbot.rag.store_json import JSONVectorStore, Record

logger = structlog.get_logger()

ProgressCallback = Callable[[int, int, bool], None]


@dataclass
class ChunkOutcome:
    """Result of embedding a single chunk."""

    index: int
    text: str
    embedding: Optional[List[float]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.embedding is not None


@dataclass
class TrainingReport:
    """Summary of a training run."""

    store_path: Path
    outcomes: List[ChunkOutcome] = field(default_factory=list)

    @property
    def chunks_total(self) -> int:
        return len(self.outcomes)

    @property
    def records_saved(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def skipped(self) -> List[int]:
        return [o.index for o in self.outcomes if not o.ok]


class IngestPipeline:
    """Pipeline that trains the vector store on a single text."""

    def __init__(
        self,
        embedder: EmbeddingClient,
        store: JSONVectorStore,
        chunk_size: int = None,
    ):
        """Initialize the ingest pipeline.

        Args:
            embedder: Embedding client for document chunks
            store: Vector store overwritten by every run
            chunk_size: Words per chunk (default from config)
        """
        self.embedder = embedder
        self.store = store
        self.chunker = WordChunker(chunk_size=chunk_size)

    async def embed_chunks(
        self,
        chunks: List[str],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[ChunkOutcome]:
        """Embed chunks sequentially, recording a per-chunk outcome."""
        outcomes = []

        for index, chunk in enumerate(chunks):
            try:
                embedding = await self.embedder.embed(chunk, TaskType.DOCUMENT)
                outcome = ChunkOutcome(index=index, text=chunk, embedding=embedding)
            except EmbeddingFailed as e:
                logger.warning(
                    "chunk_embedding_skipped",
                    chunk_index=index,
                    error=str(e),
                    text_preview=chunk[:100],
                )
                outcome = ChunkOutcome(index=index, text=chunk, error=str(e))

            outcomes.append(outcome)
            if progress_callback:
                progress_callback(index + 1, len(chunks), outcome.ok)

        return outcomes

    async def train(
        self,
        text: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> TrainingReport:
        """Replace the vector store with embeddings of the given text.

        Args:
            text: Raw document text
            progress_callback: Optional callback(current, total, ok) per chunk

        Returns:
            TrainingReport with per-chunk outcomes

        Raises:
            ContentUnavailable: If text is empty
        """
        if not text or not text.strip():
            raise ContentUnavailable("There is no content to train on.")

        chunks = self.chunker.chunk_text(text)
        logger.info("training_started", **self.chunker.get_chunk_stats(chunks))

        outcomes = await self.embed_chunks(chunks, progress_callback)
        records = [Record(text=o.text, embedding=o.embedding) for o in outcomes if o.ok]

        if not records:
            logger.warning("training_produced_no_records", chunk_count=len(chunks))

        self.store.save(records)

        report = TrainingReport(store_path=self.store.path, outcomes=outcomes)
        logger.info(
            "training_completed",
            chunks_total=report.chunks_total,
            records_saved=report.records_saved,
            chunks_skipped=len(report.skipped),
        )
        return report
