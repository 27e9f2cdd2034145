"""Message construction and rendering.

:func:`build_message` validates caller input into an immutable
:class:`MessageSpec`. The spec renders itself once, at construction, with
the standard library ``email`` package, so header problems surface before
any connection is opened and the DATA payload is fixed.

Header rules:
    * ``To`` is mandatory; ``Cc`` appears only when non-empty.
    * ``Bcc`` appears only when non-empty AND ``keep_bcc_header`` is set.
      Otherwise Bcc addresses are envelope-only recipients.
    * ``Content-Type`` is emitted only for HTML bodies.

Plain bodies go out unencoded while they are ASCII with lines of at most
998 characters. Anything else is quoted-printable UTF-8.
"""

from __future__ import annotations

import quopri
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.policy import SMTP, SMTPUTF8
from email.utils import formatdate, make_msgid
from typing import TYPE_CHECKING

from smtp_dispatch.domain.enums import AddressField
from smtp_dispatch.domain.errors import InvalidHeaderError, MissingFromError, MissingRecipientsError
from smtp_dispatch.domain.resolution import is_blank, resolve_with_fallback

from .addresses import AddressList, EmailAddress, format_address_list, parse_address_list

if TYPE_CHECKING:
    from smtp_dispatch.application.ports import SettingsSource

#: RFC 5321 limit on a text line, excluding the CRLF.
MAX_LINE_LENGTH = 998


def needs_transfer_encoding(body: str) -> bool:
    """Return True when a plain body cannot travel as raw 7bit text.

    Example:
        >>> needs_transfer_encoding("Hello"), needs_transfer_encoding("Grüße")
        (False, True)
        >>> needs_transfer_encoding("x" * 999)
        True
    """
    if not body.isascii():
        return True
    return any(len(line) > MAX_LINE_LENGTH for line in body.splitlines())


def _set_header(message: EmailMessage, name: str, value: str) -> None:
    """Store one header, reporting unusable values as InvalidHeaderError."""
    if "\r" in value or "\n" in value:
        raise InvalidHeaderError(name.lower(), "line breaks are not allowed")
    try:
        message[name] = value
    except ValueError as exc:
        raise InvalidHeaderError(name.lower(), str(exc)) from exc


@dataclass(frozen=True, slots=True)
class MessageSpec:
    """Validated, immutable description of one outgoing message.

    ``rendered`` holds the DATA payload produced at construction.
    """

    subject: str
    body: str
    is_html: bool
    sender: EmailAddress
    to: AddressList
    cc: AddressList = ()
    bcc: AddressList = ()
    keep_bcc_header: bool = False
    rendered: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.to:
            raise MissingRecipientsError()
        object.__setattr__(self, "rendered", self.to_email_message().as_bytes())

    @property
    def envelope_recipients(self) -> list[str]:
        """All RCPT TO addresses: to, then cc, then bcc."""
        return [address.value for address in (*self.to, *self.cc, *self.bcc)]

    @property
    def needs_smtputf8(self) -> bool:
        """True when any envelope address carries non-ASCII characters."""
        return not all(address.isascii() for address in (self.sender.value, *self.envelope_recipients))

    def to_email_message(self) -> EmailMessage:
        """Render headers and body into an EmailMessage using CRLF line endings.

        Raises:
            InvalidHeaderError: A header value contains line breaks or is
                otherwise rejected by the ``email`` package.
        """
        message = EmailMessage(policy=SMTPUTF8 if self.needs_smtputf8 else SMTP)
        _set_header(message, "From", self.sender.value)
        _set_header(message, "To", format_address_list(self.to))
        if self.cc:
            _set_header(message, "Cc", format_address_list(self.cc))
        if self.bcc and self.keep_bcc_header:
            _set_header(message, "Bcc", format_address_list(self.bcc))
        _set_header(message, "Subject", self.subject)
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=self.sender.domain)
        message["MIME-Version"] = "1.0"

        if self.is_html:
            message.set_content(self.body, subtype="html", charset="utf-8")
        elif needs_transfer_encoding(self.body):
            # no Content-Type for plain text, so the body is shipped as QP-encoded UTF-8
            message["Content-Transfer-Encoding"] = "quoted-printable"
            message.set_payload(quopri.encodestring(self.body.encode("utf-8")).decode("ascii"))
        else:
            message.set_payload(self.body)
        return message

    def as_bytes(self) -> bytes:
        """Return the wire form handed to the DATA command."""
        return self.rendered


def _resolve_sender(from_address: str | None, settings: SettingsSource) -> EmailAddress:
    """Determine the sender from the explicit argument or the configured default.

    Raises:
        MissingFromError: When neither is present.
        InvalidAddressError: When the winning value is malformed.
    """
    sender = resolve_with_fallback(
        None if is_blank(from_address) else from_address,
        settings.get("from_address"),
        parse=lambda value: EmailAddress.parse(str(value), field=AddressField.FROM),
    )
    if sender is None:
        raise MissingFromError()
    return sender


def build_message(
    *,
    subject: str,
    body: str,
    to: str | None,
    settings: SettingsSource,
    is_html: bool = False,
    from_address: str | None = None,
    cc: str | None = None,
    bcc: str | None = None,
    keep_bcc_header: bool = False,
) -> MessageSpec:
    """Build a MessageSpec from raw caller input plus the configured default sender.

    Args:
        subject: Subject line, passed through verbatim.
        body: Message body, passed through verbatim.
        to: Comma-separated recipients; at least one is required.
        settings: Defaults source consulted for ``from_address``.
        is_html: Declare the body as ``text/html``.
        from_address: Sender override.
        cc: Comma-separated carbon-copy recipients (blank means none).
        bcc: Comma-separated blind-copy recipients (blank means none).
        keep_bcc_header: Keep a visible Bcc header instead of hiding the list.

    Returns:
        Immutable, validated message.

    Raises:
        TypeError: When subject or body is None.
        MissingFromError: No sender passed and none configured.
        MissingRecipientsError: ``to`` is empty.
        InvalidAddressError: Any address is malformed.
        InvalidHeaderError: The subject contains line breaks.

    Example:
        >>> from smtp_dispatch.adapters.memory.settings import InMemorySettingsSource
        >>> spec = build_message(
        ...     subject="Hi", body="Hello", to="a@example.com,b@example.com",
        ...     settings=InMemorySettingsSource({"from_address": "noreply@example.com"}),
        ... )
        >>> str(spec.sender), spec.envelope_recipients
        ('noreply@example.com', ['a@example.com', 'b@example.com'])
    """
    if subject is None or body is None:
        raise TypeError("subject and body must not be None")

    sender = _resolve_sender(from_address, settings)
    to_list = parse_address_list(to, field=AddressField.TO)
    if not to_list:
        raise MissingRecipientsError()

    return MessageSpec(
        subject=subject,
        body=body,
        is_html=is_html,
        sender=sender,
        to=to_list,
        cc=parse_address_list(cc, field=AddressField.CC),
        bcc=parse_address_list(bcc, field=AddressField.BCC),
        keep_bcc_header=keep_bcc_header,
    )


def split_headers(rendered: str | bytes) -> dict[str, str]:
    """Return the unfolded header block of a rendered message as a dict.

    Example:
        >>> split_headers("To: a@example.com\\r\\nSubject: Hi\\r\\n\\r\\nbody")
        {'To': 'a@example.com', 'Subject': 'Hi'}
    """
    text = rendered.decode("ascii", errors="replace") if isinstance(rendered, bytes) else rendered
    head = text.replace("\r\n", "\n").split("\n\n", 1)[0]
    headers: dict[str, str] = {}
    last: str | None = None
    for line in head.split("\n"):
        if line[:1] in (" ", "\t") and last is not None:
            headers[last] += line
            continue
        name, sep, value = line.partition(": ")
        if sep:
            headers[name] = value
            last = name
    return headers


__all__ = [
    "MAX_LINE_LENGTH",
    "MessageSpec",
    "build_message",
    "needs_transfer_encoding",
    "split_headers",
]
