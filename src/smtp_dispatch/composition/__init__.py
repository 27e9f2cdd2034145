"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config
from ..adapters.config.sources import get_settings_source

# Email services
from ..adapters.email.sender import send_email
from ..adapters.email.transport import create_transport

# Logging services
from ..adapters.logging.setup import init_logging

# Static conformance assertions: each adapter must structurally satisfy its Protocol.
if TYPE_CHECKING:
    from ..adapters.memory.email import TransportSpy
    from ..application.ports import (
        CreateTransport,
        DisplayConfig,
        GetConfig,
        GetSettingsSource,
        InitLogging,
        SendEmail,
    )

    _assert_get_config: GetConfig = get_config
    _assert_get_settings_source: GetSettingsSource = get_settings_source
    _assert_display_config: DisplayConfig = display_config
    _assert_send_email: SendEmail = send_email
    _assert_create_transport: CreateTransport = create_transport
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    get_settings_source: GetSettingsSource
    display_config: DisplayConfig
    send_email: SendEmail
    create_transport: CreateTransport
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        get_settings_source=get_settings_source,
        display_config=display_config,
        send_email=send_email,
        create_transport=create_transport,
        init_logging=init_logging,
    )


def build_testing(
    *,
    spy: TransportSpy | None = None,
    config_data: Mapping[str, Any] | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    The real orchestrator still runs, so configuration and message errors
    behave exactly as in production; config loading, display and the SMTP
    session are replaced.

    Args:
        spy: TransportSpy receiving every send; a fresh one when None.
        config_data: What ``get_config`` returns, as a plain dict.
    """
    from ..adapters.memory import (
        DisplayConfigRecorder,
        InMemoryConfigLoader,
        TransportSpy,
        get_settings_source_in_memory,
        init_logging_in_memory,
    )

    transport_spy = spy if spy is not None else TransportSpy()

    return AppServices(
        get_config=InMemoryConfigLoader(dict(config_data or {})),
        get_settings_source=get_settings_source_in_memory,
        display_config=DisplayConfigRecorder(),
        send_email=send_email,
        create_transport=transport_spy.create_transport,
        init_logging=init_logging_in_memory,
    )


__all__ = [
    "AppServices",
    "build_production",
    "build_testing",
    "create_transport",
    "display_config",
    "get_config",
    "get_settings_source",
    "init_logging",
    "send_email",
]
