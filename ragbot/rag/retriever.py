"""Retriever for the query path.

Handles:
- Store preconditions (missing, corrupt, empty)
- Query embedding generation
- Best-match search and relevance gating
"""
from dataclasses import dataclass
from typing import Optional
import structlog

from ragbot import config
from ragbot.exceptions import EmbeddingFailed, EmbeddingUnavailable, StoreEmpty
from ragbot.rag.embedder import EmbeddingClient, TaskType
from ragbot.rag.similarity import Match, best_match, is_relevant
from ragbot.rag.store_json import JSONVectorStore

logger = structlog.get_logger()


@dataclass
class RetrievalResult:
    """Outcome of looking a query up in the store."""

    query: str
    match: Optional[Match]
    threshold: float

    @property
    def use_context(self) -> bool:
        """True when the best match clears the relevance threshold."""
        return is_relevant(self.match, self.threshold)

    @property
    def context(self) -> Optional[str]:
        return self.match.text if self.use_context else None


class Retriever:
    """Semantic retriever over the JSON vector store. Never writes the store."""

    def __init__(
        self,
        embedder: EmbeddingClient,
        store: JSONVectorStore,
        threshold: float = None,
    ):
        """Initialize the retriever.

        Args:
            embedder: Embedding client for the query text
            store: Vector store to read
            threshold: Minimum (exclusive) score for a match to be used as context
        """
        self.embedder = embedder
        self.store = store
        self.threshold = config.RELEVANCE_THRESHOLD if threshold is None else threshold

    async def retrieve(self, query: str) -> RetrievalResult:
        """Find the stored chunk most similar to the query.

        Raises:
            StoreNotFound: No training data yet
            StoreCorrupt: Store file could not be parsed
            StoreEmpty: Store holds no records
            EmbeddingUnavailable: The query could not be embedded
            DimensionMismatch: Query and stored vectors differ in length
        """
        records = self.store.load()
        if not records:
            logger.warning("vector_store_empty", path=str(self.store.path))
            raise StoreEmpty("Training data is empty. Train on a source first.")

        logger.info("retrieval_started", query_length=len(query), records=len(records))

        try:
            query_embedding = await self.embedder.embed(query, TaskType.QUERY)
        except EmbeddingFailed as e:
            logger.error("query_embedding_failed", error=str(e))
            raise EmbeddingUnavailable(
                f"Could not create an embedding for the question: {e}"
            ) from e

        match = best_match(query_embedding, records)
        result = RetrievalResult(query=query, match=match, threshold=self.threshold)

        logger.info(
            "retrieval_completed",
            best_score=match.score if match else None,
            best_index=match.index if match else None,
            use_context=result.use_context,
            threshold=self.threshold,
        )

        return result
