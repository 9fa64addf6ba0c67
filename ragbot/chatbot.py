"""Chatbot facade: training from sources and answering questions.

Wires the settings into the Gemini client, embedding client, vector store,
ingest pipeline and retriever, and owns the completion call.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
import structlog

from ragbot.config import Settings
from ragbot.exceptions import CompletionFailed
from ragbot.llm_client import GeminiClient, extract_text
from ragbot.rag.embedder import EmbeddingClient
from ragbot.rag.ingest import IngestPipeline, ProgressCallback, TrainingReport
from ragbot.rag.prompts import build_context_prompt, build_plain_prompt
from ragbot.rag.retriever import RetrievalResult, Retriever
from ragbot.rag.store_json import JSONVectorStore
from ragbot import sources

logger = structlog.get_logger()


@dataclass
class Answer:
    """Final answer together with how it was produced."""

    text: str
    prompt: str
    retrieval: RetrievalResult


class Chatbot:
    """Single-document RAG chatbot."""

    def __init__(
        self,
        settings: Settings,
        llm_client: Optional[GeminiClient] = None,
        embedder: Optional[EmbeddingClient] = None,
        store: Optional[JSONVectorStore] = None,
    ):
        settings.validate()
        self.settings = settings
        self.llm_client = llm_client or GeminiClient(settings)
        self.embedder = embedder or EmbeddingClient.from_settings(
            settings, self.llm_client
        )
        self.store = store or JSONVectorStore(settings.vector_store_path)

        self.ingest = IngestPipeline(
            self.embedder, self.store, chunk_size=settings.chunk_size
        )
        self.retriever = Retriever(
            self.embedder, self.store, threshold=settings.relevance_threshold
        )

    async def train(
        self, text: str, progress_callback: ProgressCallback = None
    ) -> TrainingReport:
        return await self.ingest.train(text, progress_callback)

    async def train_from_url(
        self, url: str, progress_callback: ProgressCallback = None
    ) -> TrainingReport:
        text = await sources.fetch_website_text(url, timeout=self.settings.http_timeout)
        return await self.ingest.train(text, progress_callback)

    async def train_from_file(
        self, path: Path, progress_callback: ProgressCallback = None
    ) -> TrainingReport:
        text = sources.read_text_file(path)
        return await self.ingest.train(text, progress_callback)

    async def ask(self, query: str) -> Answer:
        """Answer a question, grounding it in the best stored chunk when relevant.

        Raises:
            StoreNotFound, StoreCorrupt, StoreEmpty: Before any completion call
            EmbeddingUnavailable: The question could not be embedded
            CompletionFailed: The generative model call failed
        """
        retrieval = await self.retriever.retrieve(query)

        if retrieval.use_context:
            prompt = build_context_prompt(retrieval.context, query)
        else:
            prompt = build_plain_prompt(query)

        try:
            data = await self.llm_client.generate_content(prompt)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("completion_failed", error=str(e), error_type=type(e).__name__)
            raise CompletionFailed(f"Failed to get an answer from the model: {e}") from e

        text = extract_text(data)
        if not text:
            logger.error("completion_empty", model=self.settings.chat_model)
            raise CompletionFailed("The model returned no answer text")

        return Answer(text=text, prompt=prompt, retrieval=retrieval)
