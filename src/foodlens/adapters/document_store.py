"""Key-value document store interface."""

from typing import Protocol

Document = dict[str, object] | list[object]


class DocumentStore(Protocol):
    """Stores whole JSON documents by key.

    Implementations raise StoreUnavailable when the backend fails.
    """

    def get(self, key: str) -> Document | None:
        """Return the document for a key, if present."""

    def put(self, key: str, document: Document) -> None:
        """Create or replace the document for a key."""

    def delete(self, key: str) -> None:
        """Remove the document for a key; missing keys are ignored."""
