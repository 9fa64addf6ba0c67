"""Test doubles and response builders shared by unit tests."""
from typing import Dict, List

import httpx


def http_status_error(status_code: int) -> httpx.HTTPStatusError:
    """Build the error httpx raises from raise_for_status()."""
    request = httpx.Request("POST", "https://gemini.test/v1beta/models/m:embedContent")
    response = httpx.Response(status_code, request=request, text="error body")
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


def embedding_response(values: List[float]) -> Dict:
    return {"embedding": {"values": values}}


def completion_response(text: str) -> Dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
