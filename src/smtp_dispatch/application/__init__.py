"""Application layer - port definitions.

Contains the Protocols that adapters satisfy and that the composition
root wires together.

Contents:
    * :mod:`.ports` - Protocol definitions for adapter objects and functions
"""

from __future__ import annotations

from .ports import (
    CreateTransport,
    DisplayConfig,
    GetConfig,
    GetSettingsSource,
    InitLogging,
    SendEmail,
    SettingsSource,
    Transport,
)

__all__ = [
    "CreateTransport",
    "DisplayConfig",
    "GetConfig",
    "GetSettingsSource",
    "InitLogging",
    "SendEmail",
    "SettingsSource",
    "Transport",
]
