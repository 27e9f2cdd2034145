"""Apply ``--set SECTION.KEY=VALUE`` CLI overrides to a layered Config.

Typical use is adjusting the settings registry for a single invocation,
e.g. ``--set smtp.port=2525 --set smtp.tls=false``.
"""

from __future__ import annotations

from dataclasses import dataclass

import orjson
from lib_layered_config import Config

Scalar = str | int | float | bool | None | list[object] | dict[str, object]


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One ``section.key=value`` assignment."""

    section: str
    key: str
    value: Scalar


def coerce_value(raw: str) -> Scalar:
    """Interpret ``raw`` as JSON where possible, otherwise keep the text.

    Examples:
        >>> coerce_value("2525"), coerce_value("false"), coerce_value("smtp.example.com")
        (2525, False, 'smtp.example.com')
        >>> coerce_value("") == ""
        True
    """
    if not raw:
        return raw
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def parse_override(raw: str) -> ConfigOverride:
    """Parse ``SECTION.KEY=VALUE``.

    Only the first ``=`` and the first ``.`` are significant, so values may
    contain either character.

    Raises:
        ValueError: If ``=`` or the section dot is missing, or a part is empty.

    Examples:
        >>> parse_override("smtp.server=smtp.example.com")
        ConfigOverride(section='smtp', key='server', value='smtp.example.com')
        >>> parse_override("smtp") # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: Invalid override 'smtp': expected SECTION.KEY=VALUE
    """
    path, sep, value = raw.partition("=")
    section, dot, key = path.partition(".")
    if not sep or not dot or not section.strip() or not key.strip():
        raise ValueError(f"Invalid override {raw!r}: expected SECTION.KEY=VALUE")
    return ConfigOverride(section=section.strip(), key=key.strip(), value=coerce_value(value))


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Return a Config with every override merged in (``config`` itself when none).

    Examples:
        >>> cfg = Config({"smtp": {"port": 587}}, {})
        >>> apply_overrides(cfg, ("smtp.port=2525",))["smtp"]["port"]
        2525
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config
    merged: dict[str, dict[str, object]] = {}
    for raw in raw_overrides:
        override = parse_override(raw)
        merged.setdefault(override.section, {})[override.key] = override.value
    return config.with_overrides(merged)


__all__ = [
    "ConfigOverride",
    "apply_overrides",
    "coerce_value",
    "parse_override",
]
