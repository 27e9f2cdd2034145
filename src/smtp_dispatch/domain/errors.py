"""Domain-specific exceptions for typed error handling at boundaries.

Every error carries a ``kind`` class attribute naming the failure category
so callers can branch on it without importing every subclass. Messages
always name the offending field or the SMTP reply, never a bare "failed".
"""

from __future__ import annotations


class SmtpDispatchError(Exception):
    """Base class for every error raised while preparing or sending a message."""

    kind: str = "SmtpDispatchError"


class ConfigurationError(SmtpDispatchError):
    """Missing, invalid, or incomplete configuration.

    Raised when required configuration values are absent, malformed, or
    logically inconsistent. Typically caught at CLI boundaries to provide
    user-friendly error messages.

    Example:
        >>> from smtp_dispatch.domain.errors import ConfigurationError
        >>> err = ConfigurationError("No SMTP server configured")
        >>> str(err)
        'No SMTP server configured'
    """

    kind = "ConfigurationError"


class MissingConfigError(ConfigurationError):
    """A required setting has neither an override nor a configured default.

    Example:
        >>> err = MissingConfigError("server")
        >>> err.field
        'server'
        >>> str(err)
        'SMTP server not provided and no default configured'
    """

    kind = "MissingConfig"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"SMTP {field} not provided and no default configured")


class InvalidConfigError(ConfigurationError):
    """A setting is present but cannot be parsed into its expected type.

    Example:
        >>> err = InvalidConfigError("port", "not a number")
        >>> str(err)
        'Invalid SMTP port: not a number'
    """

    kind = "InvalidConfig"

    def __init__(self, field: str, cause: object) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"Invalid SMTP {field}: {cause}")


class IncompleteCredentialsError(ConfigurationError):
    """Only one half of the username/password pair resolved.

    Example:
        >>> str(IncompleteCredentialsError("password"))
        'SMTP username provided without password and no default configured'
    """

    kind = "IncompleteCredentials"

    def __init__(self, missing: str) -> None:
        self.missing = missing
        present = "username" if missing == "password" else "password"
        super().__init__(f"SMTP {present} provided without {missing} and no default configured")


class TlsSetupError(ConfigurationError):
    """TLS parameters could not be constructed for the relay host."""

    kind = "TlsSetupFailed"

    def __init__(self, host: str, cause: object) -> None:
        self.host = host
        self.cause = cause
        super().__init__(f"Failed to create TLS parameters for {host}: {cause}")


class MessageError(SmtpDispatchError):
    """The message cannot be built from the supplied input."""

    kind = "MessageError"


class MissingFromError(MessageError):
    """No sender address was passed and none is configured."""

    kind = "MissingFrom"

    def __init__(self) -> None:
        super().__init__("From address not provided and no default configured")


class MissingRecipientsError(MessageError):
    """The ``to`` list resolved to zero addresses."""

    kind = "MissingRecipients"

    def __init__(self) -> None:
        super().__init__("At least one 'to' recipient is required")


class InvalidHeaderError(MessageError):
    """A header value cannot be written to the message.

    Example:
        >>> err = InvalidHeaderError("subject", "line breaks are not allowed")
        >>> err.field, str(err)
        ('subject', 'Invalid subject header: line breaks are not allowed')
    """

    kind = "InvalidHeader"

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field} header: {reason}")


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Raised when an address fails RFC 5321/5322 validation. Inherits from
    ValueError so generic ``except ValueError`` handlers still catch it.

    Example:
        >>> err = InvalidRecipientError("Invalid email: not-an-email")
        >>> isinstance(err, ValueError)
        True
    """

    kind = "InvalidRecipient"


class InvalidAddressError(InvalidRecipientError, SmtpDispatchError):
    """One segment of an address list is malformed.

    Example:
        >>> err = InvalidAddressError("cc", "not-an-address")
        >>> str(err)
        "Invalid cc address: 'not-an-address'"
    """

    kind = "InvalidAddress"

    def __init__(self, field: str, segment: str) -> None:
        self.field = field
        self.segment = segment
        super().__init__(f"Invalid {field} address: {segment!r}")


class DeliveryError(SmtpDispatchError):
    """Email delivery failed at the network or SMTP level.

    Example:
        >>> err = DeliveryError("Connection refused by smtp.example.com:587")
        >>> str(err)
        'Connection refused by smtp.example.com:587'
    """

    kind = "DeliveryError"


class TransportSendError(DeliveryError):
    """Connecting, handshaking, or talking SMTP to the relay failed."""

    kind = "TransportSendFailed"


class SmtpRejectedError(DeliveryError):
    """The relay answered with a reply code outside the 2xx class.

    Example:
        >>> err = SmtpRejectedError("550", "Mailbox not found")
        >>> str(err)
        'SMTP error 550: Mailbox not found'
        >>> err.code
        '550'
    """

    kind = "SmtpRejected"

    def __init__(self, code: str, detail: str) -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"SMTP error {code}: {detail}")


__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "IncompleteCredentialsError",
    "InvalidAddressError",
    "InvalidConfigError",
    "InvalidHeaderError",
    "InvalidRecipientError",
    "MessageError",
    "MissingConfigError",
    "MissingFromError",
    "MissingRecipientsError",
    "SmtpDispatchError",
    "SmtpRejectedError",
    "TlsSetupError",
    "TransportSendError",
]
