"""Adapter factory function."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from .adapter import Adapter
from .docstore.base import DocStore
from .settings import Settings


def adapter(
    storage: Literal["memory", "disk"] = "memory",
    *,
    path: str | None = None,
    settings: Settings | Mapping[str, Any] | None = None,
    init: bool = True,
) -> Adapter:
    """Create an Adapter with sensible defaults.

    Args:
        storage: ``"memory"`` (default) or ``"disk"``.
        path: Required when ``storage="disk"``. Directory path for
            the disk backend.
        settings: A ``Settings`` instance or a plain mapping of
            settings (camelCase keys accepted).
        init: Run ``Adapter.init()`` before returning (default True).

    Returns:
        An ``Adapter`` instance.
    """
    # Build backend
    backend: DocStore
    if storage == "memory":
        from .docstore.memory import Memory

        backend = Memory()
    elif storage == "disk":
        if path is None:
            raise ValueError("path is required when storage='disk'")
        from .docstore.disk import Disk

        backend = Disk(path)
    else:
        raise ValueError(f"Unknown storage: {storage!r}")

    if settings is not None and not isinstance(settings, Settings):
        settings = Settings.from_dict(settings)

    db = Adapter(backend, settings)
    if init:
        db.init()
    return db
