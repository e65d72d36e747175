"""Revision lookup ahead of mutating writes."""

import logging
from typing import Iterable

from .docstore.base import DocStore

logger = logging.getLogger(__name__)


class RevisionResolver:
    """Fetch the current revision tokens needed for a safe write.

    Missing documents resolve to None; store failures propagate.
    """

    def __init__(self, store: DocStore) -> None:
        self.store = store

    def resolve(self, key: str) -> str | None:
        """Current revision of one document, or None if absent."""
        doc = self.store.get(key)
        return doc.rev if doc is not None else None

    def resolve_many(self, keys: Iterable[str]) -> dict[str, str | None]:
        """Current revisions of many documents in a single round trip.

        Duplicate keys are collapsed, keeping first-seen order. Keys the
        store leaves out of its answer resolve to None.
        """
        distinct = list(dict.fromkeys(keys))
        if not distinct:
            return {}
        found = self.store.multi_get(distinct)
        logger.debug(
            "Resolved %d revisions (%d existing)",
            len(distinct),
            sum(1 for k in distinct if found.get(k) is not None),
        )
        return {key: found.get(key) for key in distinct}
