"""In-memory settings source for testing.

Replaces the registry/environment sources with a plain dict so tests never
touch process-wide state and can run in parallel.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class InMemorySettingsSource:
    """Read-only defaults backed by a dict copy.

    Example:
        >>> source = InMemorySettingsSource({"server": "127.0.0.1"})
        >>> source.get("server"), source.get("port")
        ('127.0.0.1', None)
    """

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str) -> object | None:
        return self.values.get(key)


__all__ = ["InMemorySettingsSource"]
