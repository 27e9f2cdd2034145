"""Pure resolution helpers with no I/O or framework dependencies."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar, overload

T = TypeVar("T")


def is_blank(value: object) -> bool:
    """Return True for None and whitespace-only strings.

    Example:
        >>> is_blank(None), is_blank("  "), is_blank(""), is_blank(0)
        (True, True, True, False)
    """
    return value is None or (isinstance(value, str) and not value.strip())


@overload
def resolve_with_fallback(
    override: T | None,
    source_value: object,
    default: T,
    *,
    parse: Callable[[object], T],
) -> T: ...


@overload
def resolve_with_fallback(
    override: T | None,
    source_value: object,
    default: None = None,
    *,
    parse: Callable[[object], T],
) -> T | None: ...


def resolve_with_fallback(
    override: T | None,
    source_value: object,
    default: T | None = None,
    *,
    parse: Callable[[object], T],
) -> T | None:
    """Pick a value by precedence: override, then source, then default.

    ``override`` wins whenever it is not None. Otherwise ``source_value`` is
    used unless it is blank. Both candidates pass through ``parse`` so an
    override gets the same validation as a configured value. ``default`` is
    returned untouched.

    Args:
        override: Per-call value, or None when the caller did not supply one.
        source_value: Raw value from the settings source (string from the
            environment, typed value from TOML), or None.
        default: Hard-coded fallback; None means "no default".
        parse: Converter raising on malformed input.

    Returns:
        The parsed winning value, or ``default``.

    Example:
        >>> resolve_with_fallback(None, "2525", 587, parse=int)
        2525
        >>> resolve_with_fallback(25, "2525", 587, parse=int)
        25
        >>> resolve_with_fallback(None, "", 587, parse=int)
        587
        >>> resolve_with_fallback(None, None, parse=str) is None
        True
    """
    if override is not None:
        return parse(override)
    if not is_blank(source_value):
        return parse(source_value)
    return default


__all__ = ["is_blank", "resolve_with_fallback"]
