"""revkv error types."""


class RevKVError(Exception):
    """Base class for all revkv errors."""


class TransportError(RevKVError):
    """Raised when the backing store is unreachable or misbehaves.

    Unrelated to document state. Never retried by revkv.
    """


class NotFoundError(RevKVError):
    """Raised when a document (or index definition) does not exist.

    Attributes:
        key: The missing document key or index id.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Not found: {key}")


class ConflictError(RevKVError):
    """Raised when a write carries a stale or missing revision token.

    Another writer changed the document since its revision was read.
    The caller should re-read and retry if it wants to.

    Attributes:
        key: The document key.
        rev: The revision token the write was attempted with.
    """

    def __init__(self, key: str, rev: str | None) -> None:
        self.key = key
        self.rev = rev
        super().__init__(f"Document update conflict on {key!r} (rev={rev!r})")


class IndexCompilationError(RevKVError):
    """Raised when a new index definition cannot be compiled or persisted.

    Compilation is idempotent, so retrying the whole query is safe.

    Attributes:
        index_id: The id of the index being created.
    """

    def __init__(self, index_id: str, reason: str | None = None) -> None:
        self.index_id = index_id
        msg = f"Could not create index {index_id}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
