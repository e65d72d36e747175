"""Abstract revisioned document store interface."""

import hashlib
import pickle
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from ..errors import ConflictError, NotFoundError


@dataclass(frozen=True)
class Document:
    """A stored document: key, current revision token and value."""

    key: str
    rev: str
    value: Any


@dataclass(frozen=True)
class WriteItem:
    """One entry of a batched write.

    ``rev`` is the token the writer observed (None for a new document).
    ``deleted`` marks a removal, in which case ``value`` is ignored.
    """

    key: str
    rev: str | None = None
    value: Any = None
    deleted: bool = False


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one ``WriteItem``, in submission order."""

    key: str
    ok: bool
    rev: str | None = None
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class DocStore(ABC):
    """Document store with revision-based optimistic concurrency.

    Every successful write assigns the document a new opaque revision
    token. Updates and deletes of an existing document must present
    its current token or they are rejected with ``ConflictError``.
    """

    @abstractmethod
    def get(self, key: str) -> Document | None:
        """Get a document, or None if not found."""

    @abstractmethod
    def save(self, key: str, rev: str | None, value: Any) -> str:
        """Create or update a document and return its new revision.

        ``rev`` must be None to create and the current revision to
        update. Raises ``ConflictError`` otherwise.
        """

    @abstractmethod
    def delete(self, key: str, rev: str) -> None:
        """Delete a document at the given revision.

        Raises ``NotFoundError`` if absent, ``ConflictError`` if
        ``rev`` is stale.
        """

    @abstractmethod
    def multi_get(self, keys: Iterable[str]) -> dict[str, str | None]:
        """Current revision per key in one round trip (None if absent)."""

    @abstractmethod
    def bulk_write(self, items: Sequence[WriteItem]) -> list[WriteResult]:
        """Apply a batch of writes, reporting per-item results.

        Items follow the rules of ``save`` / ``delete`` but failures are
        reported in the result instead of raised. A delete without a
        revision for a missing document is a successful no-op.
        """

    @abstractmethod
    def raw_query(self, index_id: str) -> list[str]:
        """Keys selected by a persisted index definition, sorted.

        Raises ``NotFoundError`` if the index is not defined.
        """

    @abstractmethod
    def get_system_doc(self, name: str) -> dict | None:
        """Get a system document's content, or None if not found."""

    @abstractmethod
    def save_system_doc(self, name: str, content: dict) -> None:
        """Replace a system document's content."""

    @abstractmethod
    def merge_system_doc(self, name: str, field: str, entries: dict) -> dict:
        """Atomically add ``entries`` to the mapping at ``content[field]``.

        Creates the document and the field if missing. Entries already
        present under other keys are kept, so concurrent merges never
        lose each other's additions. Returns the resulting content.
        """


def new_revision(previous: str | None, value: Any) -> str:
    """Compute the revision token following ``previous`` for ``value``.

    Tokens look like ``"<generation>-<digest>"``. The generation counts
    writes to the document; the digest covers the generation and the
    pickled value.
    """
    generation = int(previous.split("-", 1)[0]) + 1 if previous else 1
    h = hashlib.sha256()
    h.update(str(generation).encode())
    h.update(pickle.dumps(value))
    return f"{generation}-{h.hexdigest()[:16]}"


def check_revision(key: str, current: str | None, rev: str | None) -> None:
    """Raise ``ConflictError`` unless ``rev`` is the current revision."""
    if current != rev:
        raise ConflictError(key, rev)


def error_code(error: Exception) -> str:
    """Short code reported in a failed ``WriteResult``."""
    if isinstance(error, ConflictError):
        return "conflict"
    if isinstance(error, NotFoundError):
        return "not_found"
    return type(error).__name__
