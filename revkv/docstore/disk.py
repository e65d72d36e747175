"""Disk-backed document store using diskcache."""

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Sequence, cast

from ..errors import NotFoundError, RevKVError, TransportError
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

DOC_KEY = "__doc__%s"
SYSTEM_KEY = "__system__%s"


class Disk(DocStore):
    """Document store backed by diskcache (SQLite + mmap).

    Documents are stored as ``(rev, value)`` tuples. Each write runs in
    a diskcache transaction so the revision check and the write are
    atomic across threads and processes sharing the directory.

    Eviction is turned off: diskcache never drops documents to stay
    under a size limit.

    Args:
        directory: Cache directory.
        timeout: SQLite lock timeout in seconds.
    """

    def __init__(self, directory: str, timeout: float = 60) -> None:
        from diskcache import Cache as DiskCache

        self.store = DiskCache(directory, eviction_policy="none", timeout=timeout)

    @contextmanager
    def _transact(self) -> Iterator[None]:
        from diskcache import Timeout as DiskTimeout

        try:
            with self.store.transact():
                yield
        except DiskTimeout as e:
            raise TransportError(f"diskcache timed out: {e}") from e

    def _entry(self, key: str) -> tuple[str, Any] | None:
        return cast(tuple[str, Any] | None, self.store.get(DOC_KEY % key))

    def get(self, key: str) -> Document | None:
        with self._transact():
            entry = self._entry(key)
        if entry is None:
            return None
        rev, value = entry
        return Document(key, rev, value)

    def save(self, key: str, rev: str | None, value: Any) -> str:
        with self._transact():
            return self._save(key, rev, value)

    def delete(self, key: str, rev: str) -> None:
        with self._transact():
            self._delete(key, rev)

    def multi_get(self, keys: Iterable[str]) -> dict[str, str | None]:
        with self._transact():
            return {
                key: entry[0] if (entry := self._entry(key)) else None
                for key in keys
            }

    def bulk_write(self, items: Sequence[WriteItem]) -> list[WriteResult]:
        results: list[WriteResult] = []
        with self._transact():
            for item in items:
                try:
                    if item.deleted:
                        if item.rev is None and self._entry(item.key) is None:
                            results.append(WriteResult(item.key, True))
                            continue
                        self._delete(item.key, item.rev)
                        results.append(WriteResult(item.key, True))
                    else:
                        new_rev = self._save(item.key, item.rev, item.value)
                        results.append(WriteResult(item.key, True, new_rev))
                except RevKVError as e:
                    results.append(
                        WriteResult(item.key, False, item.rev, error_code(e))
                    )
        return results

    def raw_query(self, index_id: str) -> list[str]:
        prefix = DOC_KEY % ""
        with self._transact():
            key_filter = lookup_filter(
                self.store.get(SYSTEM_KEY % INDEX_DOC), index_id
            )
            keys = [
                str(k)[len(prefix):]
                for k in self.store.iterkeys()
                if str(k).startswith(prefix)
            ]
        return key_filter.select(keys)

    def get_system_doc(self, name: str) -> dict | None:
        with self._transact():
            return cast(dict | None, self.store.get(SYSTEM_KEY % name))

    def save_system_doc(self, name: str, content: dict) -> None:
        with self._transact():
            self.store[SYSTEM_KEY % name] = content

    def merge_system_doc(self, name: str, field: str, entries: dict) -> dict:
        with self._transact():
            content = cast(dict, self.store.get(SYSTEM_KEY % name) or {})
            content.setdefault(field, {}).update(entries)
            self.store[SYSTEM_KEY % name] = content
        return content

    def close(self) -> None:
        """Close the underlying cache handle."""
        self.store.close()

    # -- Helpers (caller holds a transaction) --

    def _save(self, key: str, rev: str | None, value: Any) -> str:
        entry = self._entry(key)
        check_revision(key, entry[0] if entry else None, rev)
        new_rev = new_revision(rev, value)
        self.store[DOC_KEY % key] = (new_rev, value)
        return new_rev

    def _delete(self, key: str, rev: str | None) -> None:
        entry = self._entry(key)
        if entry is None:
            raise NotFoundError(key)
        check_revision(key, entry[0], rev)
        del self.store[DOC_KEY % key]
