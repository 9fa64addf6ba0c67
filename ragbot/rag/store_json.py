"""JSON vector store.

Handles:
- Record validation on load (pydantic)
- Whole-file overwrite on save
- Dimension consistency across records
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
import structlog

from ragbot import config
from ragbot.exceptions import (
    DimensionMismatch,
    StoreCorrupt,
    StoreNotFound,
    StoreWriteFailed,
)

logger = structlog.get_logger()


class Record(BaseModel):
    """A chunk's original text paired with its embedding."""

    text: str
    embedding: List[float] = Field(..., min_length=1)

    @property
    def dimension(self) -> int:
        return len(self.embedding)


_records_adapter = TypeAdapter(List[Record])


class JSONVectorStore:
    """Persists a list of records as one human-readable JSON file."""

    def __init__(self, path: Path = None):
        """Initialize the store.

        Args:
            path: Store file location (default: DATA_DIR/data-gemini.json)
        """
        self.path = Path(path) if path else config.DATA_DIR / "data-gemini.json"

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, records: Sequence[Record]) -> None:
        """Overwrite the store with the given records.

        The file is written to a temporary sibling first and then moved into
        place, so an interrupted save leaves the previous store intact.

        Raises:
            DimensionMismatch: If records disagree on embedding length
            StoreWriteFailed: If the file cannot be written
        """
        records = list(records)
        dimensions = {r.dimension for r in records}
        if len(dimensions) > 1:
            raise DimensionMismatch(
                f"Records have mixed embedding dimensions: {sorted(dimensions)}"
            )

        tmp_path = self.path.with_name(self.path.name + ".tmp")

        payload = [r.model_dump() for r in records]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("vector_store_save_failed", path=str(self.path), error=str(e))
            if tmp_path.exists():
                tmp_path.unlink()
            raise StoreWriteFailed(
                f"Could not write training data to {self.path}: {e}"
            ) from e

        logger.info(
            "vector_store_saved",
            path=str(self.path),
            record_count=len(records),
            dimension=dimensions.pop() if dimensions else None,
        )

    def load(self) -> List[Record]:
        """Read every record from the store.

        Raises:
            StoreNotFound: If no store file exists yet
            StoreCorrupt: If the file cannot be read or is not a JSON list of records
        """
        if not self.path.exists():
            raise StoreNotFound(f"No training data found at {self.path}. Train first.")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            records = _records_adapter.validate_python(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.error("vector_store_corrupt", path=str(self.path), error=str(e))
            raise StoreCorrupt(
                f"Training data at {self.path} is corrupt: {e}"
            ) from e
        except OSError as e:
            logger.error("vector_store_read_failed", path=str(self.path), error=str(e))
            raise StoreCorrupt(
                f"Training data at {self.path} could not be read: {e}"
            ) from e

        logger.info("vector_store_loaded", path=str(self.path), record_count=len(records))
        return records

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the store on disk."""
        if not self.path.exists():
            return {"exists": False, "record_count": 0, "dimension": None}

        records = self.load()
        return {
            "exists": True,
            "path": str(self.path),
            "record_count": len(records),
            "dimension": records[0].dimension if records else None,
            "size_bytes": self.path.stat().st_size,
        }
