"""Configuration display: the effective SMTP defaults and the raw layered dump.

:func:`build_settings_report` answers "what would ``send`` use if I passed
nothing?" for the active defaults source: each ``[smtp]`` key with its value,
where it came from, and whether the whole set resolves into a usable
connection. Passwords are always shown as ``***``.

:func:`display_config` prints the merged layered configuration as
lib_layered_config renders it.

Both flush lib_log_rich before writing so log lines never interleave with
the output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import lib_log_rich.runtime
import orjson
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console
from rich.table import Table

from smtp_dispatch.domain.enums import OutputFormat, SettingsBackend
from smtp_dispatch.domain.errors import ConfigurationError
from smtp_dispatch.domain.resolution import is_blank

from ..email.config import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    DEFAULT_USE_TLS,
    ConnectionOverrides,
    resolve_connection_config,
)
from .sources import ENVIRONMENT_KEYS, REGISTRY_SECTION

if TYPE_CHECKING:
    from smtp_dispatch.application.ports import SettingsSource

MASK = "***"

_BUILT_IN: Mapping[str, object] = {
    "port": DEFAULT_PORT,
    "tls": DEFAULT_USE_TLS,
    "timeout": DEFAULT_TIMEOUT,
}


@dataclass(frozen=True, slots=True)
class SettingRow:
    """One defaults key. ``origin`` is the backend name, ``default`` or ``unset``."""

    key: str
    value: str | None
    origin: str


@dataclass(frozen=True, slots=True)
class SettingsReport:
    """Effective SMTP defaults for one backend.

    Example:
        >>> report = SettingsReport(source="environment", rows=(), error="SMTP server not configured")
        >>> report.resolved
        False
    """

    source: str
    rows: tuple[SettingRow, ...]
    error: str | None = None
    unknown_keys: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.error is None

    def to_json(self) -> bytes:
        payload = {
            "source": self.source,
            "resolved": self.resolved,
            "error": self.error,
            "settings": {row.key: {"value": row.value, "origin": row.origin} for row in self.rows},
            "unknown_keys": list(self.unknown_keys),
        }
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def _display_value(key: str, raw: object) -> str:
    if key == "password":
        return MASK
    if isinstance(raw, bool):
        return str(raw).lower()
    return str(raw)


def _unknown_registry_keys(config: Config) -> tuple[str, ...]:
    section: object = config.get(REGISTRY_SECTION, default={})
    if not isinstance(section, Mapping):
        return ()
    return tuple(sorted(key for key in section if key not in ENVIRONMENT_KEYS))


def build_settings_report(config: Config, backend: SettingsBackend, source: SettingsSource) -> SettingsReport:
    """Describe what ``source`` supplies and whether it resolves.

    Keys missing from ``source`` fall back to the built-in defaults (port,
    tls, timeout) or are reported as ``unset``. Resolution runs with no
    per-call overrides, exactly as a bare ``send`` would.

    Example:
        >>> from smtp_dispatch.adapters.memory import InMemorySettingsSource
        >>> source = InMemorySettingsSource({"server": "smtp.example.com", "password": "pw", "username": "u"})
        >>> report = build_settings_report(Config({}, {}), SettingsBackend.ENVIRONMENT, source)
        >>> report.resolved, {row.key: row.value for row in report.rows}["password"]
        (True, '***')
        >>> {row.key: row.origin for row in report.rows}["port"]
        'default'
    """
    rows: list[SettingRow] = []
    for key in ENVIRONMENT_KEYS:
        raw = source.get(key)
        if not is_blank(raw):
            rows.append(SettingRow(key, _display_value(key, raw), backend.value))
        elif key in _BUILT_IN:
            rows.append(SettingRow(key, _display_value(key, _BUILT_IN[key]), "default"))
        else:
            rows.append(SettingRow(key, None, "unset"))

    error: str | None = None
    try:
        resolve_connection_config(ConnectionOverrides(), source)
    except ConfigurationError as exc:
        error = str(exc)

    unknown = _unknown_registry_keys(config) if backend is SettingsBackend.REGISTRY else ()
    return SettingsReport(source=backend.value, rows=tuple(rows), error=error, unknown_keys=unknown)


def _flush_logs() -> None:
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()


def display_settings_report(
    report: SettingsReport,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    console: Console | None = None,
) -> None:
    """Print ``report`` as a table with a status line, or as JSON."""
    _flush_logs()
    out = console if console is not None else Console()

    if output_format is OutputFormat.JSON:
        out.out(report.to_json().decode("utf-8"), highlight=False)
        return

    table = Table(title=f"SMTP defaults from {report.source}")
    table.add_column("key")
    table.add_column("value")
    table.add_column("origin")
    for row in report.rows:
        table.add_row(row.key, row.value if row.value is not None else "-", row.origin)
    out.print(table)
    if report.unknown_keys:
        out.print(f"Ignored [smtp] keys: {', '.join(report.unknown_keys)}", markup=False, highlight=False)
    status = "ready" if report.resolved else f"not usable - {report.error}"
    out.print(f"Status: {status}", markup=False, highlight=False)


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Print the merged layered configuration, or one ``section`` of it.

    lib_layered_config masks secret-looking keys in this view.

    Raises:
        ValueError: If ``section`` does not exist.
    """
    _flush_logs()
    _lib_display(
        config,
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = [
    "MASK",
    "SettingRow",
    "SettingsReport",
    "build_settings_report",
    "display_config",
    "display_settings_report",
]
