"""Declarative key filters persisted as index definitions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .errors import NotFoundError

INDEX_DOC = "__revkv_indexes__"
"""Name of the system document holding every index definition."""


@dataclass(frozen=True)
class KeyFilter:
    """Select keys matching ``match`` and not matching ``exclude``.

    Both patterns are regular expressions searched (unanchored) in the
    key string. An empty or None ``exclude`` excludes nothing.
    Patterns are not globs; anchor with ``^`` and ``$`` where needed.
    """

    match: str
    exclude: str | None = None

    def __post_init__(self) -> None:
        # Fail early on bad patterns, before anything is persisted
        re.compile(self.match)
        if self.exclude:
            re.compile(self.exclude)

    def matches(self, key: str) -> bool:
        if re.search(self.match, key) is None:
            return False
        if self.exclude and re.search(self.exclude, key) is not None:
            return False
        return True

    def select(self, keys: Iterable[str]) -> list[str]:
        """Matching keys, sorted."""
        return sorted(k for k in keys if self.matches(k))

    def to_dict(self) -> dict[str, str | None]:
        return {"match": self.match, "exclude": self.exclude}

    @classmethod
    def from_dict(cls, data: dict) -> KeyFilter:
        return cls(data["match"], data.get("exclude"))


def lookup_filter(index_doc: dict | None, index_id: str) -> KeyFilter:
    """Load a persisted filter from the index system document.

    Raises ``NotFoundError`` if the index is not defined.
    """
    filters = (index_doc or {}).get("filters", {})
    if index_id not in filters:
        raise NotFoundError(index_id)
    return KeyFilter.from_dict(filters[index_id])
