"""In-memory document store."""

import copy
import threading
from typing import Any, Iterable, Sequence

from ..errors import NotFoundError, RevKVError
from ..filters import INDEX_DOC, lookup_filter
from .base import (
    DocStore,
    Document,
    WriteItem,
    WriteResult,
    check_revision,
    error_code,
    new_revision,
)


class Memory(DocStore):
    """A memory-backed document store.

    All operations are protected by a single lock, so revision checks
    and the writes they guard are atomic. Values are deep-copied on the
    way in and out.
    """

    def __init__(self) -> None:
        self.docs: dict[str, tuple[str, Any]] = {}
        self.system: dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Document | None:
        with self._lock:
            entry = self.docs.get(key)
        if entry is None:
            return None
        rev, value = entry
        return Document(key, rev, copy.deepcopy(value))

    def save(self, key: str, rev: str | None, value: Any) -> str:
        with self._lock:
            return _save(self.docs, key, rev, value)

    def delete(self, key: str, rev: str) -> None:
        with self._lock:
            _delete(self.docs, key, rev)

    def multi_get(self, keys: Iterable[str]) -> dict[str, str | None]:
        with self._lock:
            return {
                key: entry[0] if (entry := self.docs.get(key)) else None
                for key in keys
            }

    def bulk_write(self, items: Sequence[WriteItem]) -> list[WriteResult]:
        results: list[WriteResult] = []
        with self._lock:
            # Staged on a copy: an unexpected error leaves the store untouched
            docs = dict(self.docs)
            for item in items:
                try:
                    if item.deleted:
                        if item.rev is None and item.key not in docs:
                            results.append(WriteResult(item.key, True))
                            continue
                        _delete(docs, item.key, item.rev)
                        results.append(WriteResult(item.key, True))
                    else:
                        new_rev = _save(docs, item.key, item.rev, item.value)
                        results.append(WriteResult(item.key, True, new_rev))
                except RevKVError as e:
                    results.append(
                        WriteResult(item.key, False, item.rev, error_code(e))
                    )
            self.docs = docs
        return results

    def raw_query(self, index_id: str) -> list[str]:
        with self._lock:
            key_filter = lookup_filter(self.system.get(INDEX_DOC), index_id)
            return key_filter.select(self.docs.keys())

    def get_system_doc(self, name: str) -> dict | None:
        with self._lock:
            content = self.system.get(name)
        return copy.deepcopy(content) if content is not None else None

    def save_system_doc(self, name: str, content: dict) -> None:
        with self._lock:
            self.system[name] = copy.deepcopy(content)

    def merge_system_doc(self, name: str, field: str, entries: dict) -> dict:
        with self._lock:
            content = self.system.setdefault(name, {})
            content.setdefault(field, {}).update(copy.deepcopy(entries))
            return copy.deepcopy(content)


def _save(
    docs: dict[str, tuple[str, Any]], key: str, rev: str | None, value: Any
) -> str:
    entry = docs.get(key)
    check_revision(key, entry[0] if entry else None, rev)
    new_rev = new_revision(rev, value)
    docs[key] = (new_rev, copy.deepcopy(value))
    return new_rev


def _delete(docs: dict[str, tuple[str, Any]], key: str, rev: str | None) -> None:
    entry = docs.get(key)
    if entry is None:
        raise NotFoundError(key)
    check_revision(key, entry[0], rev)
    del docs[key]
