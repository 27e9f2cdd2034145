"""In-memory transport for testing.

Provides a transport factory that satisfies the CreateTransport port but
performs no SMTP operations.

Contents:
    * :class:`TransportSpy` - Captures transports and messages for test assertions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from smtp_dispatch.domain.results import SendResult

from ..email.config import ConnectionConfig
from ..email.message import MessageSpec


def _empty_record_list() -> list[dict[str, Any]]:
    """Create an empty typed list for send records."""
    return []


def _default_reply_lines() -> list[str]:
    return ["2.0.0 Ok: queued"]


@dataclass
class TransportSpy:
    """Captures transport creation and sends for test assertions.

    Each test should create its own TransportSpy to avoid cross-test pollution.
    Pass :meth:`create_transport` wherever a ``transport_factory`` is expected.

    Attributes:
        configs: Every ConnectionConfig a transport was created for.
        sent_messages: One record per ``send`` call (config, message, timeout, rendered).
        reply_code: Reply code returned for DATA.
        reply_lines: Reply text lines returned for DATA.
        raise_exception: When set, ``send`` raises this exception instead.

    Example:
        >>> spy = TransportSpy(reply_code=451, reply_lines=["4.3.0 Try again later"])
        >>> transport = spy.create_transport(ConnectionConfig(server_host="127.0.0.1"))
        >>> len(spy.configs)
        1
    """

    configs: list[ConnectionConfig] = field(default_factory=list)
    sent_messages: list[dict[str, Any]] = field(default_factory=_empty_record_list)
    reply_code: int = 250
    reply_lines: list[str] = field(default_factory=_default_reply_lines)
    raise_exception: Exception | None = None

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.configs.clear()
        self.sent_messages.clear()
        self.raise_exception = None

    def create_transport(self, config: ConnectionConfig) -> _SpyTransport:
        """Record ``config`` and return a transport bound to this spy."""
        self.configs.append(config)
        return _SpyTransport(spy=self, config=config)


@dataclass(frozen=True, slots=True)
class _SpyTransport:
    spy: TransportSpy
    config: ConnectionConfig

    def send(self, message: MessageSpec, *, timeout: float | None = None) -> SendResult:
        self.spy.sent_messages.append(
            {
                "config": self.config,
                "message": message,
                "timeout": timeout,
                "rendered": message.as_bytes(),
            }
        )
        if self.spy.raise_exception is not None:
            raise self.spy.raise_exception
        return SendResult.from_reply(self.spy.reply_code, self.spy.reply_lines)


__all__ = ["TransportSpy"]
