"""Embedding acquisition with exponential backoff on rate limiting.

Only HTTP 429 responses are retried. Every other failure (auth errors,
transport errors, malformed or empty responses) ends the call at once.
"""
import asyncio
from enum import Enum
from typing import Awaitable, Callable, List
import httpx
import structlog

from ragbot.config import Settings
from ragbot.exceptions import EmbeddingFailed, EmbeddingRateLimited
from ragbot.llm_client import GeminiClient

logger = structlog.get_logger()

RATE_LIMIT_STATUS = 429


class TaskType(str, Enum):
    """Hint telling the provider how the vector will be used."""

    DOCUMENT = "RETRIEVAL_DOCUMENT"
    QUERY = "RETRIEVAL_QUERY"


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Seconds to wait after the given (0-indexed) rate-limited attempt."""
    return base_delay * (2 ** attempt)


class EmbeddingClient:
    """Turns text into an embedding vector via the Gemini API."""

    def __init__(
        self,
        llm_client: GeminiClient,
        max_attempts: int = 5,
        base_delay: float = 3.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the embedding client.

        Args:
            llm_client: Gemini client issuing the remote calls
            max_attempts: Total attempts allowed while rate limited
            base_delay: First backoff delay in seconds
            sleep: Coroutine used to wait between attempts
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self.llm_client = llm_client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, llm_client: GeminiClient = None):
        return cls(
            llm_client or GeminiClient(settings),
            max_attempts=settings.embed_max_attempts,
            base_delay=settings.embed_base_delay,
        )

    async def embed(self, text: str, task_type: TaskType) -> List[float]:
        """Embed text, retrying with backoff while the provider rate limits.

        Args:
            text: Text to embed
            task_type: DOCUMENT for indexing, QUERY for searching

        Returns:
            Non-empty embedding vector

        Raises:
            EmbeddingRateLimited: Every attempt was rate limited
            EmbeddingFailed: Non-retryable error or missing embedding
        """
        task_type = TaskType(task_type)

        for attempt in range(self.max_attempts):
            try:
                response = await self.llm_client.embed_content(
                    text, task_type=task_type.value
                )
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code != RATE_LIMIT_STATUS:
                    logger.error(
                        "embedding_request_failed",
                        task_type=task_type.value,
                        status_code=status_code,
                    )
                    raise EmbeddingFailed(
                        f"Embedding request failed with HTTP {status_code}"
                    ) from e

                if attempt == self.max_attempts - 1:
                    logger.error(
                        "embedding_retries_exhausted",
                        task_type=task_type.value,
                        attempts=self.max_attempts,
                    )
                    raise EmbeddingRateLimited(
                        f"Embedding still rate limited after {self.max_attempts} attempts",
                        attempts=self.max_attempts,
                    ) from e

                delay = backoff_delay(attempt, self.base_delay)
                logger.warning(
                    "embedding_retry_scheduled",
                    task_type=task_type.value,
                    attempt=attempt + 1,
                    max_attempts=self.max_attempts,
                    delay_seconds=delay,
                )
                await self._sleep(delay)
                continue
            except httpx.HTTPError as e:
                logger.error(
                    "embedding_request_failed",
                    task_type=task_type.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise EmbeddingFailed(f"Embedding request failed: {e}") from e
            except ValueError as e:
                # Body was not JSON
                logger.error("embedding_response_malformed", error=str(e))
                raise EmbeddingFailed(f"Malformed embedding response: {e}") from e

            values = _extract_values(response)
            if not values:
                logger.error(
                    "embedding_missing_in_response",
                    task_type=task_type.value,
                    attempt=attempt + 1,
                )
                raise EmbeddingFailed("Embedding not available in response")

            return values

        # Unreachable: the loop either returns or raises on its last attempt.
        raise EmbeddingFailed("Embedding attempts exhausted")


def _extract_values(response) -> List[float]:
    if not isinstance(response, dict):
        return []
    embedding = response.get("embedding")
    if not isinstance(embedding, dict):
        return []
    values = embedding.get("values")
    if not isinstance(values, list):
        return []
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError):
        return []
