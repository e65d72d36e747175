"""Adapter settings."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

# camelCase names used by existing configuration files
_ALIASES = {
    "writeInterval": "write_interval",
    "maxListeners": "max_listeners",
}


@dataclass(frozen=True)
class Settings:
    """Connection and tuning settings accepted by an ``Adapter``.

    The connection fields describe where the backing store lives; the
    concrete ``DocStore`` is responsible for using them. ``cache`` and
    ``write_interval`` are hints for a write-buffering layer placed in
    front of the adapter and are carried, not enforced.
    """

    host: str = "localhost"
    port: int = 5984
    user: str | None = None
    password: str | None = None
    database: str = "revkv"
    max_listeners: int | None = None
    cache: int = 1000
    write_interval: int = 100

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from a mapping, accepting camelCase aliases.

        Raises:
            ValueError: On unknown keys.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown setting: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)
