"""Email adapter - address parsing, configuration, message building, SMTP transport.

Structure:
    * :mod:`.addresses` - EmailAddress value type and address-list parser
    * :mod:`.config` - ConnectionConfig model and resolver
    * :mod:`.message` - MessageSpec and builder
    * :mod:`.transport` - SMTP relay transport and factory
    * :mod:`.sender` - Send orchestration (public operation)
"""

from __future__ import annotations

from .addresses import EmailAddress, normalize_address_input, parse_address_list
from .config import ConnectionConfig, ConnectionOverrides, resolve_connection_config
from .message import MessageSpec, build_message
from .sender import dispatch_email, send_email
from .transport import SmtpTransport, create_transport

__all__ = [
    "ConnectionConfig",
    "ConnectionOverrides",
    "EmailAddress",
    "MessageSpec",
    "SmtpTransport",
    "build_message",
    "create_transport",
    "dispatch_email",
    "normalize_address_input",
    "parse_address_list",
    "resolve_connection_config",
    "send_email",
]
