"""In-memory document store.

Answers the same typed queries as Sanity by evaluating them against
documents held in memory. Documents come from a dataset export
(``sanity dataset export``, NDJSON) or are passed in directly; used for
local development and tests.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from storefront.catalog.groq import Document, Query

logger = structlog.get_logger()

DRAFT_PREFIX = "drafts."


class InMemoryDocumentStore:
    """Document store backed by a dict of published documents.

    Draft documents (IDs starting with ``drafts.``) are ignored, matching
    the published perspective the Sanity client queries with.
    """

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        """Initialize the store.

        Args:
            documents: Initial documents; each needs an ``_id``.
        """
        self._documents: dict[str, Document] = {}
        for document in documents:
            self.add(document)

    @classmethod
    def from_ndjson(cls, path: str | Path) -> "InMemoryDocumentStore":
        """Load a dataset export.

        Args:
            path: NDJSON file with one document per line.

        Returns:
            Populated store.
        """
        documents = []
        with open(path, encoding="utf-8") as export:
            for line in export:
                line = line.strip()
                if line:
                    documents.append(json.loads(line))
        store = cls(documents)
        logger.info("Loaded dataset export", path=str(path), documents=len(store))
        return store

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def documents(self) -> list[Document]:
        return list(self._documents.values())

    def add(self, document: Document) -> None:
        """Add or replace a document. Drafts are skipped."""
        document_id = document["_id"]
        if document_id.startswith(DRAFT_PREFIX):
            return
        self._documents[document_id] = document

    def deref(self, value: Any) -> Document | None:
        """Resolve a ``{"_ref": id}`` reference; inline objects pass through."""
        if not isinstance(value, dict):
            return None
        if "_ref" in value:
            return self._documents.get(value["_ref"])
        return value

    async def fetch(self, query: Query, params: dict[str, Any] | None = None) -> Any:
        """Run a query against the stored documents.

        Raises:
            QueryParameterError: If the query references a missing parameter.
        """
        bound = query.bind(params)
        return query.evaluate(self._documents.values(), bound, self.deref)

    async def close(self) -> None:
        """Nothing to release."""
