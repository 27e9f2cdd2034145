"""In-memory adapter implementations for testing.

Lightweight implementations of the application ports that operate entirely
in memory -- no filesystem, no environment, no SMTP, no logging framework.

Contents:
    * :mod:`.config` - Config loader and display recorder
    * :mod:`.settings` - In-memory settings source
    * :mod:`.email` - Recording transport (TransportSpy)
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import DisplayConfigRecorder, InMemoryConfigLoader, get_settings_source_in_memory
from .email import TransportSpy
from .logging import init_logging_in_memory
from .settings import InMemorySettingsSource

# Static conformance assertions
if TYPE_CHECKING:
    from smtp_dispatch.application.ports import (
        CreateTransport,
        DisplayConfig,
        GetConfig,
        GetSettingsSource,
        InitLogging,
        SettingsSource,
    )

    _assert_get_config: GetConfig = InMemoryConfigLoader()
    _assert_get_settings_source: GetSettingsSource = get_settings_source_in_memory
    _assert_display_config: DisplayConfig = DisplayConfigRecorder()
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_settings_source: SettingsSource = InMemorySettingsSource()
    _assert_create_transport: CreateTransport = TransportSpy().create_transport

__all__ = [
    "DisplayConfigRecorder",
    "InMemoryConfigLoader",
    "InMemorySettingsSource",
    "TransportSpy",
    "get_settings_source_in_memory",
    "init_logging_in_memory",
]
