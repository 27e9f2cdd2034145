"""Settings sources for process-wide SMTP defaults.

Two deployment styles exist and exactly one is active at a time:

* **registry**: the ``[smtp]`` section of the layered configuration
  (``smtp.server``, ``smtp.port``, ...), see :class:`LayeredSettingsSource`.
* **environment**: ``SMTP_SERVER``, ``SMTP_PORT``, ... read from a mapping
  (``os.environ`` by default), see :class:`EnvironmentSettingsSource`.

Both return raw values; parsing and precedence belong to the resolver.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from lib_layered_config import Config

from smtp_dispatch.domain.enums import SettingsBackend

REGISTRY_SECTION: Final[str] = "smtp"

#: Settings key -> environment variable name.
ENVIRONMENT_KEYS: Final[Mapping[str, str]] = {
    "server": "SMTP_SERVER",
    "port": "SMTP_PORT",
    "tls": "SMTP_TLS",
    "username": "SMTP_USERNAME",
    "password": "SMTP_PASSWORD",
    "from_address": "SMTP_FROM",
    "timeout": "SMTP_TIMEOUT",
}


def _process_environment() -> Mapping[str, str]:
    return os.environ


@dataclass(frozen=True, slots=True)
class EnvironmentSettingsSource:
    """Read defaults from ``SMTP_*`` variables.

    Example:
        >>> source = EnvironmentSettingsSource({"SMTP_SERVER": "smtp.example.com"})
        >>> source.get("server"), source.get("port")
        ('smtp.example.com', None)
    """

    environ: Mapping[str, str] = field(default_factory=_process_environment)

    def get(self, key: str) -> object | None:
        name = ENVIRONMENT_KEYS.get(key)
        if name is None:
            return None
        return self.environ.get(name)


@dataclass(frozen=True, slots=True)
class LayeredSettingsSource:
    """Read defaults from the ``[smtp]`` section of a layered Config.

    Example:
        >>> source = LayeredSettingsSource(Config({"smtp": {"port": 2525}}, {}))
        >>> source.get("port"), source.get("server")
        (2525, None)
    """

    config: Config

    def get(self, key: str) -> object | None:
        section: object = self.config.get(REGISTRY_SECTION, default={})
        if not isinstance(section, Mapping):
            return None
        return section.get(key)


def get_settings_source(config: Config, backend: SettingsBackend) -> LayeredSettingsSource | EnvironmentSettingsSource:
    """Return the active defaults source for ``backend``.

    Example:
        >>> type(get_settings_source(Config({}, {}), SettingsBackend.REGISTRY)).__name__
        'LayeredSettingsSource'
    """
    if backend is SettingsBackend.ENVIRONMENT:
        return EnvironmentSettingsSource()
    return LayeredSettingsSource(config)


__all__ = [
    "ENVIRONMENT_KEYS",
    "REGISTRY_SECTION",
    "EnvironmentSettingsSource",
    "LayeredSettingsSource",
    "get_settings_source",
]
