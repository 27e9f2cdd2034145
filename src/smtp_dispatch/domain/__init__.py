"""Domain layer - pure business logic with no I/O or framework dependencies.

Contents:
    * :mod:`.enums` - Domain enumerations (OutputFormat, TlsMode, AddressField, SettingsBackend)
    * :mod:`.errors` - Domain exception types
    * :mod:`.resolution` - Override/source/default precedence helper
    * :mod:`.results` - SendResult value type
"""

from __future__ import annotations

from .enums import AddressField, OutputFormat, SettingsBackend, TlsMode
from .errors import (
    ConfigurationError,
    DeliveryError,
    IncompleteCredentialsError,
    InvalidAddressError,
    InvalidConfigError,
    InvalidRecipientError,
    MessageError,
    MissingConfigError,
    MissingFromError,
    MissingRecipientsError,
    SmtpDispatchError,
    SmtpRejectedError,
    TlsSetupError,
    TransportSendError,
)
from .resolution import is_blank, resolve_with_fallback
from .results import SendResult, is_positive_completion

__all__ = [
    # Enums
    "AddressField",
    "OutputFormat",
    "SettingsBackend",
    "TlsMode",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "IncompleteCredentialsError",
    "InvalidAddressError",
    "InvalidConfigError",
    "InvalidRecipientError",
    "MessageError",
    "MissingConfigError",
    "MissingFromError",
    "MissingRecipientsError",
    "SmtpDispatchError",
    "SmtpRejectedError",
    "TlsSetupError",
    "TransportSendError",
    # Resolution
    "is_blank",
    "resolve_with_fallback",
    # Results
    "SendResult",
    "is_positive_completion",
]
