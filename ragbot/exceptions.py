"""Error taxonomy for the retrieval pipeline.

Every error carries a message suitable for showing to the operator.
"""


class RagError(Exception):
    """Base class for all ragbot errors."""


class ConfigError(RagError):
    """Required settings are missing or invalid."""


class ContentUnavailable(RagError):
    """No text could be obtained to train on."""


class EmbeddingFailed(RagError):
    """The provider did not return an embedding (terminal for this call)."""


class EmbeddingRateLimited(EmbeddingFailed):
    """Every attempt was rate limited and the retry budget is spent."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class EmbeddingUnavailable(RagError):
    """The query could not be embedded, so no search was possible."""


class StoreError(RagError):
    """Base class for vector store failures."""


class StoreNotFound(StoreError):
    """No vector store has been written yet."""


class StoreCorrupt(StoreError):
    """The store file exists but does not hold a list of records."""


class StoreEmpty(StoreError):
    """The store was loaded but holds zero records."""


class StoreWriteFailed(StoreError):
    """The store file could not be written."""


class DimensionMismatch(RagError):
    """Two embeddings that must be compared have different lengths."""


class CompletionFailed(RagError):
    """The generative model call failed."""
