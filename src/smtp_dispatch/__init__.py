"""Public package surface: the send operation, its errors and metadata.

Example:
    >>> from smtp_dispatch import send_email  # doctest: +SKIP
    >>> send_email(subject="Hi", body="Hello", to="ops@example.com", server_host="smtp.example.com")  # doctest: +SKIP
    '250'
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Email operations
from .adapters.email.sender import dispatch_email, send_email

# Settings sources
from .adapters.config.sources import EnvironmentSettingsSource, LayeredSettingsSource

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain.errors import (
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
from .domain.results import SendResult

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "EnvironmentSettingsSource",
    "IncompleteCredentialsError",
    "InvalidAddressError",
    "InvalidConfigError",
    "InvalidRecipientError",
    "LayeredSettingsSource",
    "MessageError",
    "MissingConfigError",
    "MissingFromError",
    "MissingRecipientsError",
    "SendResult",
    "SmtpDispatchError",
    "SmtpRejectedError",
    "TlsSetupError",
    "TransportSendError",
    "dispatch_email",
    "get_config",
    "print_info",
    "send_email",
]
