"""Document store backends."""

from .base import DocStore, Document, WriteItem, WriteResult
from .disk import Disk
from .memory import Memory

__all__ = ["Disk", "DocStore", "Document", "Memory", "WriteItem", "WriteResult"]
