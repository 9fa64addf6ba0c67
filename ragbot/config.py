"""Application configuration with sensible defaults."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ragbot.exceptions import ConfigError

# Paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"

# Gemini defaults
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
EMBEDDING_MODEL = "gemini-embedding-exp-03-07"
CHAT_MODEL = "gemini-2.0-flash"

# RAG defaults (word-based chunking)
CHUNK_SIZE = 1000
EMBED_MAX_ATTEMPTS = 5
EMBED_BASE_DELAY = 3.0  # seconds, doubled on every rate-limited attempt
RELEVANCE_THRESHOLD = 0.7

HTTP_TIMEOUT = 60.0
LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Runtime settings passed explicitly to clients and pipelines."""

    api_key: str
    base_url: str = GEMINI_BASE_URL
    embedding_model: str = EMBEDDING_MODEL
    chat_model: str = CHAT_MODEL
    vector_store_path: Path = DATA_DIR / "data-gemini.json"
    chunk_size: int = CHUNK_SIZE
    embed_max_attempts: int = EMBED_MAX_ATTEMPTS
    embed_base_delay: float = EMBED_BASE_DELAY
    relevance_threshold: float = RELEVANCE_THRESHOLD
    http_timeout: float = HTTP_TIMEOUT
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Build settings from environment variables (and an optional .env file).

        Raises:
            ConfigError: If a value cannot be parsed or a required one is missing
        """
        load_dotenv(dotenv_path=env_file or BASE_DIR / ".env")

        try:
            settings = cls(
                api_key=os.getenv("GEMINI_API_KEY", ""),
                base_url=os.getenv("GEMINI_BASE_URL", GEMINI_BASE_URL),
                embedding_model=os.getenv("EMBEDDING_MODEL", EMBEDDING_MODEL),
                chat_model=os.getenv("CHAT_MODEL", CHAT_MODEL),
                vector_store_path=Path(
                    os.getenv("VECTOR_STORE_PATH", str(DATA_DIR / "data-gemini.json"))
                ),
                chunk_size=int(os.getenv("CHUNK_SIZE", str(CHUNK_SIZE))),
                embed_max_attempts=int(
                    os.getenv("EMBED_MAX_ATTEMPTS", str(EMBED_MAX_ATTEMPTS))
                ),
                embed_base_delay=float(
                    os.getenv("EMBED_BASE_DELAY", str(EMBED_BASE_DELAY))
                ),
                relevance_threshold=float(
                    os.getenv("RELEVANCE_THRESHOLD", str(RELEVANCE_THRESHOLD))
                ),
                http_timeout=float(os.getenv("HTTP_TIMEOUT", str(HTTP_TIMEOUT))),
                log_level=os.getenv("LOG_LEVEL", LOG_LEVEL),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        settings.validate()
        return settings

    def validate(self) -> None:
        """Fail fast on missing credentials or out-of-range values.

        Raises:
            ConfigError: On the first invalid field
        """
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY is not set (environment or .env file)")
        if not self.embedding_model or not self.chat_model:
            raise ConfigError("EMBEDDING_MODEL and CHAT_MODEL must not be empty")
        if self.chunk_size < 1:
            raise ConfigError(f"CHUNK_SIZE must be >= 1, got {self.chunk_size}")
        if self.embed_max_attempts < 1:
            raise ConfigError(
                f"EMBED_MAX_ATTEMPTS must be >= 1, got {self.embed_max_attempts}"
            )
        if self.embed_base_delay < 0:
            raise ConfigError(
                f"EMBED_BASE_DELAY must be >= 0, got {self.embed_base_delay}"
            )
        if not -1.0 <= self.relevance_threshold <= 1.0:
            raise ConfigError(
                "RELEVANCE_THRESHOLD must be within [-1, 1], "
                f"got {self.relevance_threshold}"
            )
        if self.http_timeout <= 0:
            raise ConfigError(f"HTTP_TIMEOUT must be > 0, got {self.http_timeout}")
