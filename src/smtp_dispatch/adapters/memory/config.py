"""In-memory configuration adapters for tests.

:class:`InMemoryConfigLoader` stands in for the layered loader and records
which profiles were asked for. :class:`DisplayConfigRecorder` captures
``config --all`` calls instead of printing them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lib_layered_config import Config

from ...domain.enums import OutputFormat, SettingsBackend
from .settings import InMemorySettingsSource


@dataclass
class InMemoryConfigLoader:
    """Serve Config objects built from plain dicts.

    ``profiles`` maps a profile name to the data returned for it; any
    other profile gets ``data``.

    Example:
        >>> loader = InMemoryConfigLoader({"smtp": {"port": 25}}, profiles={"staging": {"smtp": {"port": 2525}}})
        >>> loader(profile="staging").as_dict()["smtp"]["port"], loader().as_dict()["smtp"]["port"]
        (2525, 25)
        >>> loader.requested_profiles
        ['staging', None]
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    profiles: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    requested_profiles: list[str | None] = field(default_factory=list)

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config:
        self.requested_profiles.append(profile)
        chosen = self.profiles.get(profile, self.data) if profile is not None else self.data
        return Config(dict(chosen), {})


def get_settings_source_in_memory(config: Config, backend: SettingsBackend) -> InMemorySettingsSource:
    """Freeze the ``[smtp]`` section, ignoring ``backend`` so tests never read the real environment."""
    section: object = config.get("smtp", default={})
    return InMemorySettingsSource(dict(section) if isinstance(section, Mapping) else {})


@dataclass
class DisplayConfigRecorder:
    """Satisfies the DisplayConfig port by remembering each request."""

    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(
        self,
        config: Config,
        *,
        output_format: OutputFormat = OutputFormat.HUMAN,
        section: str | None = None,
        profile: str | None = None,
    ) -> None:
        if section is not None and section not in config.as_dict():
            raise ValueError(f"Section '{section}' not found in configuration")
        self.calls.append({"data": config.as_dict(), "format": output_format, "section": section, "profile": profile})


__all__ = [
    "DisplayConfigRecorder",
    "InMemoryConfigLoader",
    "get_settings_source_in_memory",
]
