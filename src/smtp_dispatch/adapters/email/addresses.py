"""Address parsing shared by the message builder and the test adapters.

Validation delegates to btx_lib_mail and is re-raised as the domain's
InvalidAddressError, so callers never see library-specific exceptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from btx_lib_mail import validate_email_address

from smtp_dispatch.domain.enums import AddressField
from smtp_dispatch.domain.errors import InvalidAddressError
from smtp_dispatch.domain.resolution import is_blank


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """A validated ``local-part@domain`` address.

    Use :meth:`parse` to construct from untrusted text.

    Example:
        >>> EmailAddress.parse(" ops@example.com ", field=AddressField.TO)
        EmailAddress(value='ops@example.com')
        >>> str(EmailAddress.parse("a@example.com"))
        'a@example.com'
    """

    value: str

    @classmethod
    def parse(cls, raw: str, *, field: AddressField = AddressField.TO) -> EmailAddress:
        """Trim and validate ``raw``.

        Raises:
            InvalidAddressError: When the text is not a valid address.
        """
        candidate = raw.strip()
        if not candidate:
            raise InvalidAddressError(field.value, raw)
        try:
            validate_email_address(candidate)
        except ValueError as exc:
            raise InvalidAddressError(field.value, raw) from exc
        return cls(candidate)

    @property
    def domain(self) -> str:
        return self.value.rpartition("@")[2]

    def __str__(self) -> str:
        return self.value


AddressList = tuple[EmailAddress, ...]


def parse_address_list(raw: str | None, *, field: AddressField) -> AddressList:
    """Split a comma-separated string into validated addresses.

    Blank input is not an error: it yields an empty tuple and the caller
    decides whether an empty list is acceptable. Order is preserved.

    Args:
        raw: Comma-separated addresses, or None.
        field: Which message field the list belongs to (for error messages).

    Returns:
        Validated addresses in input order.

    Raises:
        InvalidAddressError: On the first malformed segment, naming it.

    Example:
        >>> [str(a) for a in parse_address_list("a@example.com, b@example.com", field=AddressField.TO)]
        ['a@example.com', 'b@example.com']
        >>> parse_address_list("   ", field=AddressField.CC)
        ()
        >>> parse_address_list("a@example.com, nope", field=AddressField.CC)  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidAddressError: Invalid cc address: 'nope'
    """
    if raw is None or is_blank(raw):
        return ()
    return tuple(EmailAddress.parse(segment.strip(), field=field) for segment in raw.split(","))


def normalize_address_input(value: str | Sequence[str] | None) -> str | None:
    """Adapt list-style address input to the comma-string form.

    Both call conventions then share :func:`parse_address_list`.

    Example:
        >>> normalize_address_input(["a@example.com", "b@example.com"])
        'a@example.com,b@example.com'
        >>> normalize_address_input("a@example.com") == "a@example.com"
        True
        >>> normalize_address_input([]) is None
        True
    """
    if value is None or isinstance(value, str):
        return value
    items = list(value)
    return ",".join(items) if items else None


def format_address_list(addresses: AddressList) -> str:
    """Render addresses the way they appear in a header.

    Example:
        >>> format_address_list((EmailAddress("a@example.com"), EmailAddress("b@example.com")))
        'a@example.com, b@example.com'
    """
    return ", ".join(address.value for address in addresses)


__all__ = [
    "AddressList",
    "EmailAddress",
    "format_address_list",
    "normalize_address_input",
    "parse_address_list",
]
