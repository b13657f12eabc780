"""JSON file document store for local use."""

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from foodlens.adapters.document_store import Document, DocumentStore
from foodlens.domain.errors import StoreUnavailable

_logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass
class JsonFileDocumentStore(DocumentStore):
    """Stores each key as one JSON file under ``root``."""

    root: Path

    def get(self, key: str) -> Document | None:
        """Return the document for a key, if present."""
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            _logger.exception("Failed to read document", extra={"key": key})
            raise StoreUnavailable(f"Failed to read {key}") from exc

    def put(self, key: str, document: Document) -> None:
        """Write the document atomically."""
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp_path, path)
        except OSError as exc:
            _logger.exception("Failed to write document", extra={"key": key})
            raise StoreUnavailable(f"Failed to write {key}") from exc

    def delete(self, key: str) -> None:
        """Remove the file for a key."""
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            _logger.exception("Failed to delete document", extra={"key": key})
            raise StoreUnavailable(f"Failed to delete {key}") from exc

    def _path_for(self, key: str) -> Path:
        return self.root / f"{_UNSAFE_CHARS.sub('_', key)}.json"
