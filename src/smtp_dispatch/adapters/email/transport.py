"""SMTP relay transport.

Provides :func:`create_transport`, which turns a resolved ConnectionConfig
into an unopened :class:`SmtpTransport` handle, and the handle's ``send``
method, which runs one SMTP session per message via ``smtplib``.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass, field

from smtp_dispatch.domain.enums import TlsMode
from smtp_dispatch.domain.errors import SmtpRejectedError, TlsSetupError, TransportSendError
from smtp_dispatch.domain.results import SendResult, is_positive_completion

from .config import ConnectionConfig
from .message import MessageSpec

logger = logging.getLogger(__name__)

# Keywords that may indicate sensitive data in exception messages
_SENSITIVE_KEYWORDS = frozenset(
    {
        "password",
        "credential",
        "auth",
        "secret",
        "token",
        "key",
        "login",
    }
)


def _sanitize_exception_message(exc: BaseException) -> str:
    """Sanitize exception message to prevent credential exposure.

    Returns a generic message when the original exception text contains
    keywords suggesting sensitive data (passwords, credentials, tokens).
    The full exception is preserved in the chain for DEBUG-level logging.

    Example:
        >>> class FakeExc(Exception): pass
        >>> _sanitize_exception_message(FakeExc("Connection refused"))
        'Connection refused'
        >>> _sanitize_exception_message(FakeExc("Auth password rejected"))
        'Email delivery failed. Check SMTP configuration.'
    """
    message = str(exc).lower()
    if any(keyword in message for keyword in _SENSITIVE_KEYWORDS):
        return "Email delivery failed. Check SMTP configuration."
    return str(exc) or type(exc).__name__


def _reply_lines(reply: bytes | str) -> list[str]:
    """Split a (possibly multi-line) SMTP reply into its text lines.

    Example:
        >>> _reply_lines(b"2.0.0 Ok\\nqueued as 1234")
        ['2.0.0 Ok', 'queued as 1234']
    """
    text = reply.decode("utf-8", errors="replace") if isinstance(reply, bytes) else reply
    return text.splitlines()


def _require_positive(command: str, code: int, reply: bytes) -> None:
    """Raise SmtpRejectedError unless the reply is in the 2xx class."""
    if not is_positive_completion(code):
        detail = "; ".join(_reply_lines(reply))
        logger.warning("SMTP command rejected", extra={"command": command, "code": code, "detail": detail})
        raise SmtpRejectedError(str(code), detail)


def _build_tls_context(host: str) -> ssl.SSLContext:
    """Create a verifying TLS context for ``host``.

    Raises:
        TlsSetupError: When the context cannot be created.
    """
    try:
        context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
        context.check_hostname = True
        context.verify_mode = ssl.CERT_REQUIRED
    except (ssl.SSLError, OSError, ValueError) as exc:
        raise TlsSetupError(host, exc) from exc
    return context


@dataclass(frozen=True, slots=True)
class SmtpTransport:
    """Prepared relay handle; no connection is held between sends.

    Example:
        >>> transport = SmtpTransport(host="127.0.0.1", port=2525, tls_mode=TlsMode.NONE)
        >>> transport.tls_mode.value, transport.credentials
        ('none', None)
    """

    host: str
    port: int
    tls_mode: TlsMode
    timeout: float = 30.0
    credentials: tuple[str, str] | None = field(default=None, repr=False)
    ssl_context: ssl.SSLContext | None = field(default=None, repr=False)

    def _connect(self, timeout: float) -> smtplib.SMTP:
        if self.tls_mode is TlsMode.WRAPPER:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=timeout, context=self.ssl_context)
        return smtplib.SMTP(self.host, self.port, timeout=timeout)

    def _submit(self, connection: smtplib.SMTP, message: MessageSpec) -> SendResult:
        connection.ehlo_or_helo_if_needed()
        if self.credentials is not None:
            connection.login(*self.credentials)

        if message.needs_smtputf8:
            if not connection.has_extn("smtputf8"):
                raise TransportSendError(
                    f"SMTP relay {self.host}:{self.port} does not support SMTPUTF8, "
                    "which internationalized addresses require"
                )
            code, reply = connection.mail(message.sender.value, ["SMTPUTF8"])
        else:
            code, reply = connection.mail(message.sender.value)
        _require_positive("MAIL", code, reply)
        for recipient in message.envelope_recipients:
            code, reply = connection.rcpt(recipient)
            _require_positive("RCPT", code, reply)

        code, reply = connection.data(message.as_bytes())
        return SendResult.from_reply(code, _reply_lines(reply))

    def send(self, message: MessageSpec, *, timeout: float | None = None) -> SendResult:
        """Open a session, submit ``message``, and close the session.

        Args:
            message: Validated message to deliver.
            timeout: Socket timeout in seconds for this call; defaults to
                the configured timeout.

        Returns:
            The relay's reply to the DATA command.

        Raises:
            SmtpRejectedError: The relay answered MAIL, RCPT, AUTH, or the
                greeting with an error reply.
            TransportSendError: Connection, TLS handshake, or protocol failure.
        """
        effective_timeout = timeout if timeout is not None else self.timeout
        logger.debug(
            "Opening SMTP session",
            extra={"host": self.host, "port": self.port, "tls_mode": self.tls_mode.value, "timeout": effective_timeout},
        )
        try:
            with self._connect(effective_timeout) as connection:
                return self._submit(connection, message)
        except smtplib.SMTPResponseException as exc:
            logger.debug("SMTP reply error", exc_info=True)
            raise SmtpRejectedError(str(exc.smtp_code), "; ".join(_reply_lines(exc.smtp_error))) from exc
        except (smtplib.SMTPException, OSError) as exc:
            logger.debug("SMTP delivery failed", exc_info=True)
            raise TransportSendError(
                f"Failed to send email via {self.host}:{self.port}: {_sanitize_exception_message(exc)}"
            ) from exc


def create_transport(config: ConnectionConfig) -> SmtpTransport:
    """Prepare a relay transport for ``config`` without connecting.

    ``use_tls`` selects TLS wrapper mode (TLS from the first byte, verified
    against ``server_host``); otherwise TLS is explicitly disabled and
    STARTTLS is never negotiated.

    Raises:
        TlsSetupError: When TLS parameters cannot be created.

    Example:
        >>> config = ConnectionConfig(server_host="smtp.example.com", port=465, username="u", password="p")
        >>> transport = create_transport(config)
        >>> transport.tls_mode is TlsMode.WRAPPER, transport.credentials
        (True, ('u', 'p'))
    """
    if config.use_tls:
        tls_mode = TlsMode.WRAPPER
        ssl_context: ssl.SSLContext | None = _build_tls_context(config.server_host)
    else:
        tls_mode = TlsMode.NONE
        ssl_context = None

    return SmtpTransport(
        host=config.server_host,
        port=config.port,
        tls_mode=tls_mode,
        timeout=config.timeout,
        credentials=config.credentials,
        ssl_context=ssl_context,
    )


__all__ = [
    "SmtpTransport",
    "create_transport",
]
