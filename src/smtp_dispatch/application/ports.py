"""Application ports: Protocol definitions for adapter objects and functions.

Callable ports define a ``__call__`` method whose signature exactly matches
the corresponding adapter function. Module-level functions satisfy them
automatically via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``ConnectionConfig``, ``MessageSpec``) are imported under
    ``TYPE_CHECKING`` only so the layer contracts hold at runtime.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from ..domain.enums import OutputFormat, SettingsBackend
from ..domain.results import SendResult

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.email.config import ConnectionConfig
    from ..adapters.email.message import MessageSpec


class SettingsSource(Protocol):
    """Read-only view of the process-wide SMTP defaults.

    Keys are the short names ``server``, ``port``, ``tls``, ``username``,
    ``password``, ``from_address`` and ``timeout``. Implementations return
    None for unset keys and never write.
    """

    def get(self, key: str) -> object | None: ...


class Transport(Protocol):
    """Prepared relay handle able to submit one message per call."""

    def send(self, message: MessageSpec, *, timeout: float | None = ...) -> SendResult: ...


class CreateTransport(Protocol):
    """Turn a resolved connection configuration into a transport handle."""

    def __call__(self, config: ConnectionConfig) -> Transport: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class GetSettingsSource(Protocol):
    """Select the active defaults source for a deployment."""

    def __call__(self, config: Config, backend: SettingsBackend) -> SettingsSource: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class SendEmail(Protocol):
    """Send one message and return the relay's reply code."""

    def __call__(
        self,
        *,
        subject: str,
        body: str,
        to: str | Sequence[str] | None,
        is_html: bool = ...,
        from_address: str | None = ...,
        cc: str | Sequence[str] | None = ...,
        bcc: str | Sequence[str] | None = ...,
        server_host: str | None = ...,
        port: int | None = ...,
        tls: bool | None = ...,
        username: str | None = ...,
        password: str | None = ...,
        timeout: float | None = ...,
        keep_bcc_header: bool = ...,
        settings: SettingsSource | None = ...,
        transport_factory: CreateTransport | None = ...,
    ) -> str: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


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
