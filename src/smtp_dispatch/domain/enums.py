"""Type-safe domain enums for output formats, TLS modes, and settings sources."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class TlsMode(str, Enum):
    """How the relay connection is secured.

    Attributes:
        WRAPPER: TLS from the first byte (implicit TLS, usually port 465).
        NONE: Plain connection; opportunistic STARTTLS is never attempted.

    Example:
        >>> TlsMode.WRAPPER.value
        'wrapper'
    """

    WRAPPER = "wrapper"
    NONE = "none"


class AddressField(str, Enum):
    """Message fields that carry addresses, used to label validation errors.

    Example:
        >>> AddressField.BCC == "bcc"
        True
    """

    FROM = "from"
    TO = "to"
    CC = "cc"
    BCC = "bcc"


class SettingsBackend(str, Enum):
    """Where process-wide SMTP defaults are read from.

    Attributes:
        REGISTRY: The ``[smtp]`` section of the layered configuration.
        ENVIRONMENT: ``SMTP_*`` environment variables.

    Example:
        >>> SettingsBackend("environment") is SettingsBackend.ENVIRONMENT
        True
    """

    REGISTRY = "registry"
    ENVIRONMENT = "environment"


__all__ = [
    "AddressField",
    "OutputFormat",
    "SettingsBackend",
    "TlsMode",
]
