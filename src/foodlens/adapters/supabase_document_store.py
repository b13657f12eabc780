"""Supabase-backed document store."""

import logging
from dataclasses import dataclass

from supabase import Client

from foodlens.adapters.document_store import Document, DocumentStore
from foodlens.domain.errors import StoreUnavailable

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseDocumentStore(DocumentStore):
    """Document store on a ``key``/``document`` Supabase table."""

    client: Client
    table: str = "documents"

    def get(self, key: str) -> Document | None:
        """Return the document for a key, if present."""
        try:
            response = (
                self.client.table(self.table)
                .select("key, document")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            _logger.exception("Failed to read document", extra={"key": key})
            raise StoreUnavailable(f"Failed to read {key}") from exc
        if not response.data:
            return None
        return response.data[0].get("document")

    def put(self, key: str, document: Document) -> None:
        """Upsert the document for a key."""
        try:
            response = (
                self.client.table(self.table)
                .upsert({"key": key, "document": document})
                .execute()
            )
        except Exception as exc:
            _logger.exception("Failed to write document", extra={"key": key})
            raise StoreUnavailable(f"Failed to write {key}") from exc
        if not response.data:
            raise StoreUnavailable(f"Supabase did not confirm write of {key}")

    def delete(self, key: str) -> None:
        """Delete the document for a key."""
        try:
            self.client.table(self.table).delete().eq("key", key).execute()
        except Exception as exc:
            _logger.exception("Failed to delete document", extra={"key": key})
            raise StoreUnavailable(f"Failed to delete {key}") from exc
