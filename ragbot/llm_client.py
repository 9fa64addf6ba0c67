"""Gemini REST client wrapper with error handling."""
import httpx
from typing import Dict, Optional
import structlog

from ragbot.config import Settings

logger = structlog.get_logger()


class GeminiClient:
    """Async client for the Gemini generative language API."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Gemini client.

        Args:
            settings: Validated settings (API key, base URL, models, timeout)
            transport: Optional httpx transport (used to stub the API in tests)
        """
        self.base_url = settings.base_url.rstrip("/")
        self.api_key = settings.api_key
        self.embedding_model = settings.embedding_model
        self.chat_model = settings.chat_model
        self.timeout = settings.http_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"x-goog-api-key": self.api_key},
        )

    async def embed_content(
        self,
        text: str,
        task_type: str,
        model: str = None,
    ) -> Dict:
        """Generate an embedding for a single text.

        Args:
            text: Text to embed
            task_type: Gemini task type (RETRIEVAL_DOCUMENT or RETRIEVAL_QUERY)
            model: Model to use (defaults to settings.embedding_model)

        Returns:
            Response dict, normally {"embedding": {"values": [...]}}

        Raises:
            httpx.HTTPStatusError: On non-2xx responses (429 when rate limited)
            httpx.HTTPError: On transport errors
        """
        model = model or self.embedding_model

        payload = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": text}]},
            "taskType": task_type,
        }

        try:
            async with self._client() as client:
                logger.debug(
                    "gemini_embedding_request",
                    model=model,
                    task_type=task_type,
                    text_length=len(text),
                )

                response = await client.post(
                    f"{self.base_url}/models/{model}:embedContent",
                    json=payload,
                )
                response.raise_for_status()

                data = response.json()

                logger.debug(
                    "gemini_embedding_response",
                    model=model,
                    dimension=_embedding_dimension(data),
                )

                return data

        except httpx.HTTPStatusError as e:
            logger.error(
                "gemini_embedding_http_error",
                model=model,
                status_code=e.response.status_code,
                detail=e.response.text[:500],
            )
            raise
        except httpx.HTTPError as e:
            logger.error("gemini_embedding_error", model=model, error=str(e))
            raise

    async def generate_content(
        self,
        prompt: str,
        model: str = None,
        temperature: Optional[float] = None,
    ) -> Dict:
        """Send a single-turn prompt to the generative model.

        Args:
            prompt: Full prompt text
            model: Model to use (defaults to settings.chat_model)
            temperature: Sampling temperature (0.0-2.0)

        Returns:
            Raw response dict with 'candidates'

        Raises:
            httpx.HTTPError: On API or transport errors
        """
        model = model or self.chat_model

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "text/plain"},
        }

        if temperature is not None:
            payload["generationConfig"]["temperature"] = temperature

        try:
            async with self._client() as client:
                logger.info(
                    "gemini_generate_request",
                    model=model,
                    prompt_length=len(prompt),
                )

                response = await client.post(
                    f"{self.base_url}/models/{model}:generateContent",
                    json=payload,
                )
                response.raise_for_status()

                data = response.json()

                logger.info(
                    "gemini_generate_response",
                    model=model,
                    response_length=len(extract_text(data)),
                )

                return data

        except httpx.HTTPStatusError as e:
            logger.error(
                "gemini_generate_http_error",
                model=model,
                status_code=e.response.status_code,
                detail=e.response.text[:500],
            )
            raise
        except httpx.HTTPError as e:
            logger.error("gemini_generate_error", model=model, error=str(e))
            raise


def _embedding_dimension(data) -> Optional[int]:
    """Length of the returned vector, or None when the payload has another shape."""
    embedding = data.get("embedding") if isinstance(data, dict) else None
    values = embedding.get("values") if isinstance(embedding, dict) else None
    return len(values) if isinstance(values, list) else None


def extract_text(data) -> str:
    """Concatenate the text parts of the first candidate.

    Returns "" for any payload that does not have the expected shape.
    """
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
