"""Adapter: a key-value facade over a revisioned document store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal

from .docstore.base import DocStore, WriteItem, WriteResult
from .errors import NotFoundError
from .index import IndexManager
from .revisions import RevisionResolver
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkOperation:
    """One set or remove in a ``do_bulk`` batch.

    ``value`` is only meaningful when ``type`` is ``"set"``.
    """

    key: str
    type: Literal["set", "remove"]
    value: Any = None

    @classmethod
    def set(cls, key: str, value: Any) -> BulkOperation:
        return cls(key, "set", value)

    @classmethod
    def remove(cls, key: str) -> BulkOperation:
        return cls(key, "remove")


class Adapter:
    """Key-value store over a ``DocStore`` with optimistic concurrency.

    Callers see plain keys and values. Revision tokens are fetched right
    before every write and never surfaced. Conflicts from concurrent
    writers propagate as ``ConflictError``; nothing is retried.

    Args:
        store: The backing document store. Its lifecycle belongs to the
            caller.
        settings: Accepted configuration (defaults if omitted).
    """

    def __init__(self, store: DocStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.revisions = RevisionResolver(store)
        self.indexes = IndexManager(store)
        self.closed = False

    def init(self) -> None:
        """Prepare the store for use. Safe to call more than once."""
        self.indexes.bootstrap()

    def close(self) -> None:
        """Mark the adapter closed. The store itself is left open."""
        if not self.closed:
            self.closed = True
            logger.info("Adapter for database %r closed", self.settings.database)

    def __enter__(self) -> Adapter:
        self.init()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Read operations --

    def get(self, key: str) -> Any:
        """Get a value, or None if the key does not exist."""
        doc = self.store.get(key)
        return doc.value if doc is not None else None

    def find_keys(self, match: str, exclude: str | None = None) -> list[str]:
        """Keys matching ``match`` but not ``exclude``.

        Both are regular expressions searched anywhere in the key, not
        globs: ``"pad:*"`` means "pad" followed by any number of colons
        and also selects ``"padding"``. Write ``r"^pad:"`` for a prefix.

        The first call for a pattern pair creates a persisted index;
        later calls reuse it.
        """
        return self.indexes.find_keys(match, exclude)

    # -- Write operations --

    def set(self, key: str, value: Any) -> None:
        """Create or overwrite the value at ``key``."""
        rev = self.revisions.resolve(key)
        self.store.save(key, rev, value)

    def remove(self, key: str) -> None:
        """Remove ``key``. Removing a missing key is a no-op."""
        rev = self.revisions.resolve(key)
        if rev is None:
            return
        try:
            self.store.delete(key, rev)
        except NotFoundError:
            # Removed by someone else since the revision was read
            pass

    def do_bulk(self, operations: Iterable[BulkOperation]) -> list[WriteResult]:
        """Apply a batch of sets and removes as one batched write.

        Revisions for every key are resolved in one round trip, then all
        writes are submitted together. Per-item results are returned as
        the store reports them; failed items are neither rolled back nor
        retried.
        """
        ops = list(operations)
        for op in ops:
            if op.type not in ("set", "remove"):
                raise ValueError(f"Unknown bulk operation type: {op.type!r}")
        if not ops:
            return []

        revs = self.revisions.resolve_many(op.key for op in ops)

        items: list[WriteItem] = []
        for op in ops:
            rev = revs.get(op.key)
            if op.type == "set":
                items.append(WriteItem(op.key, rev, op.value))
            else:
                items.append(WriteItem(op.key, rev, deleted=True))

        logger.debug("Submitting bulk write of %d items", len(items))
        return self.store.bulk_write(items)
