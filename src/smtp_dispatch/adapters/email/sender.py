"""Send orchestration: resolve, build, connect, submit.

Provides :func:`dispatch_email`, which returns the full SendResult, and
:func:`send_email`, the public operation returning the reply code string.
Configuration and message errors are raised before any network attempt.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from smtp_dispatch.domain.errors import SmtpRejectedError
from smtp_dispatch.domain.results import SendResult

from .addresses import normalize_address_input
from .config import ConnectionOverrides, resolve_connection_config
from .message import build_message
from .transport import create_transport

if TYPE_CHECKING:
    from smtp_dispatch.application.ports import CreateTransport, SettingsSource

logger = logging.getLogger(__name__)


def _default_settings() -> SettingsSource:
    from smtp_dispatch.adapters.config.sources import EnvironmentSettingsSource

    return EnvironmentSettingsSource()


def dispatch_email(
    *,
    subject: str,
    body: str,
    to: str | Sequence[str] | None,
    is_html: bool = False,
    from_address: str | None = None,
    cc: str | Sequence[str] | None = None,
    bcc: str | Sequence[str] | None = None,
    server_host: str | None = None,
    port: int | None = None,
    tls: bool | None = None,
    username: str | None = None,
    password: str | None = None,
    timeout: float | None = None,
    keep_bcc_header: bool = False,
    settings: SettingsSource | None = None,
    transport_factory: CreateTransport | None = None,
) -> SendResult:
    """Send one message and return the relay's positive reply.

    Args:
        subject: Subject line (verbatim).
        body: Body text (verbatim).
        to: Comma string or list of recipient addresses; at least one.
        is_html: Send the body as ``text/html``.
        from_address: Sender override; falls back to the configured default.
        cc: Comma string or list of carbon-copy addresses.
        bcc: Comma string or list of blind-copy addresses.
        server_host: Relay host override.
        port: Relay port override.
        tls: TLS wrapper mode override.
        username: SMTP login override.
        password: SMTP password override.
        timeout: Socket timeout in seconds for this call.
        keep_bcc_header: Keep a visible Bcc header.
        settings: Defaults source; None reads ``SMTP_*`` environment variables.
        transport_factory: Builds the transport; defaults to :func:`create_transport`.

    Returns:
        SendResult of a 2xx reply.

    Raises:
        ConfigurationError: Missing/invalid settings or TLS setup failure.
        MessageError: Missing sender or recipients.
        InvalidAddressError: Malformed address in any field.
        SmtpRejectedError: The relay replied with a non-2xx code.
        TransportSendError: Network or protocol failure.
    """
    source = settings if settings is not None else _default_settings()
    factory = transport_factory if transport_factory is not None else create_transport

    config = resolve_connection_config(
        ConnectionOverrides(
            server_host=server_host,
            port=port,
            use_tls=tls,
            username=username,
            password=password,
            timeout=timeout,
        ),
        source,
    )
    message = build_message(
        subject=subject,
        body=body,
        to=normalize_address_input(to),
        settings=source,
        is_html=is_html,
        from_address=from_address,
        cc=normalize_address_input(cc),
        bcc=normalize_address_input(bcc),
        keep_bcc_header=keep_bcc_header,
    )
    transport = factory(config)

    logger.info(
        "Sending email",
        extra={
            "sender": message.sender.value,
            "recipients": message.envelope_recipients,
            "subject": subject,
            "has_html": is_html,
            "server": config.server_host,
            "port": config.port,
            "tls": config.use_tls,
        },
    )
    result = transport.send(message, timeout=timeout)

    if not result.succeeded:
        logger.warning(
            "Email rejected by relay",
            extra={"code": result.code, "detail": result.detail, "recipients": message.envelope_recipients},
        )
        raise SmtpRejectedError(result.code, result.detail)

    logger.info(
        "Email sent successfully",
        extra={"sender": message.sender.value, "recipients": message.envelope_recipients, "code": result.code},
    )
    return result


def send_email(
    *,
    subject: str,
    body: str,
    to: str | Sequence[str] | None,
    is_html: bool = False,
    from_address: str | None = None,
    cc: str | Sequence[str] | None = None,
    bcc: str | Sequence[str] | None = None,
    server_host: str | None = None,
    port: int | None = None,
    tls: bool | None = None,
    username: str | None = None,
    password: str | None = None,
    timeout: float | None = None,
    keep_bcc_header: bool = False,
    settings: SettingsSource | None = None,
    transport_factory: CreateTransport | None = None,
) -> str:
    """Send one message and return the relay's reply code (e.g. ``"250"``).

    Same arguments and errors as :func:`dispatch_email`.

    Example:
        >>> from smtp_dispatch.adapters.memory import InMemorySettingsSource, TransportSpy
        >>> spy = TransportSpy()
        >>> send_email(
        ...     subject="s", body="b", to="x@example.com", from_address="y@example.com",
        ...     server_host="127.0.0.1", port=2525, tls=False,
        ...     settings=InMemorySettingsSource(), transport_factory=spy.create_transport,
        ... )
        '250'
    """
    return dispatch_email(
        subject=subject,
        body=body,
        to=to,
        is_html=is_html,
        from_address=from_address,
        cc=cc,
        bcc=bcc,
        server_host=server_host,
        port=port,
        tls=tls,
        username=username,
        password=password,
        timeout=timeout,
        keep_bcc_header=keep_bcc_header,
        settings=settings,
        transport_factory=transport_factory,
    ).code


__all__ = [
    "dispatch_email",
    "send_email",
]
