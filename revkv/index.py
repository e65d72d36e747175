"""Lazily created key-pattern indexes."""

import hashlib
import json
import logging
import re

from .docstore.base import DocStore
from .errors import IndexCompilationError
from .filters import INDEX_DOC, KeyFilter

logger = logging.getLogger(__name__)


def index_id(match: str, exclude: str | None = None) -> str:
    """Deterministic id for a ``(match, exclude)`` pattern pair.

    Hashes the JSON encoding of the ordered pair, so no two distinct
    pairs share an id (``("a_b", "c")`` and ``("a", "b_c")`` differ).
    """
    h = hashlib.sha256(json.dumps([match, exclude]).encode())
    return h.hexdigest()[:16]


class IndexManager:
    """Compile key-pattern filters into persisted, reusable indexes.

    All definitions live in one system document (``INDEX_DOC``) shaped
    ``{"filters": {index_id: {"match": ..., "exclude": ...}}}``. The set
    only ever grows: new entries are merged in by the store atomically,
    so concurrent managers never drop each other's definitions. The
    first query for a pattern pair writes its definition; later queries
    find it there and skip straight to the indexed query.
    """

    def __init__(self, store: DocStore) -> None:
        self.store = store

    def bootstrap(self) -> None:
        """Create the empty index system document if it does not exist."""
        if self.store.get_system_doc(INDEX_DOC) is None:
            logger.info("Creating index document %s", INDEX_DOC)
            self.store.merge_system_doc(INDEX_DOC, "filters", {})

    def definitions(self) -> dict[str, dict]:
        """Persisted definitions by index id (empty if none yet)."""
        doc = self.store.get_system_doc(INDEX_DOC) or {}
        return dict(doc.get("filters", {}))

    def ensure_index(self, match: str, exclude: str | None = None) -> str:
        """Make sure an index exists for the pattern pair; return its id."""
        iid = index_id(match, exclude)
        doc = self.store.get_system_doc(INDEX_DOC) or {}
        if iid in doc.get("filters", {}):
            return iid

        try:
            key_filter = KeyFilter(match, exclude)
        except re.error as e:
            raise IndexCompilationError(iid, f"invalid pattern: {e}") from e

        logger.info(
            "Creating index %s (match=%r, exclude=%r)", iid, match, exclude
        )
        try:
            self.store.merge_system_doc(
                INDEX_DOC, "filters", {iid: key_filter.to_dict()}
            )
        except Exception as e:
            raise IndexCompilationError(iid, str(e)) from e
        return iid

    def query(self, iid: str) -> list[str]:
        """Keys selected by an existing index, in store order."""
        keys = self.store.raw_query(iid)
        logger.debug("Index %s matched %d keys", iid, len(keys))
        return keys

    def find_keys(self, match: str, exclude: str | None = None) -> list[str]:
        """Ensure the index for the pattern pair, then query it."""
        return self.query(self.ensure_index(match, exclude))
