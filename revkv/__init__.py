"""revkv: key-value adapter over a revisioned document store."""

from .adapter import Adapter, BulkOperation
from .docstore import Disk, DocStore, Document, Memory, WriteItem, WriteResult
from .errors import (
    ConflictError,
    IndexCompilationError,
    NotFoundError,
    RevKVError,
    TransportError,
)
from .filters import INDEX_DOC, KeyFilter
from .index import IndexManager, index_id
from .revisions import RevisionResolver
from .settings import Settings
from .store import adapter

__all__ = [
    "INDEX_DOC",
    "Adapter",
    "BulkOperation",
    "ConflictError",
    "Disk",
    "DocStore",
    "Document",
    "IndexCompilationError",
    "IndexManager",
    "KeyFilter",
    "Memory",
    "NotFoundError",
    "RevKVError",
    "RevisionResolver",
    "Settings",
    "TransportError",
    "WriteItem",
    "WriteResult",
    "adapter",
    "index_id",
]
