"""Connection configuration model and resolver.

Provides the ConnectionConfig Pydantic model for validated, immutable relay
settings and :func:`resolve_connection_config`, which merges per-call
overrides with the injected defaults source.

Precedence for every field: explicit override, then the settings source,
then the hard-coded default. ``server`` has no hard-coded default.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any

from btx_lib_mail import validate_smtp_host
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from smtp_dispatch.domain.errors import IncompleteCredentialsError, InvalidConfigError, MissingConfigError
from smtp_dispatch.domain.resolution import is_blank, resolve_with_fallback

if TYPE_CHECKING:
    from smtp_dispatch.application.ports import SettingsSource

DEFAULT_PORT = 587
DEFAULT_USE_TLS = True
DEFAULT_TIMEOUT = 30.0

_PORT = TypeAdapter(Annotated[int, Field(ge=1, le=65535)])
_TLS = TypeAdapter(bool)
_TIMEOUT = TypeAdapter(Annotated[float, Field(gt=0)])
# "host:25" or "[::1]:25"; a bare IPv6 literal has more than one colon and never matches
_HOST_WITH_PORT = re.compile(r"^(?:\[[^\]]*\]|[^:\[\]]+):\d+$")


class ConnectionConfig(BaseModel):
    """Validated, immutable relay settings for one send.

    Example:
        >>> config = ConnectionConfig(server_host="smtp.example.com")
        >>> config.port, config.use_tls, config.credentials
        (587, True, None)
    """

    model_config = ConfigDict(frozen=True)

    server_host: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, strict=True)
    use_tls: bool = DEFAULT_USE_TLS
    username: str | None = None
    password: str | None = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @model_validator(mode="after")
    def _validate_credentials_pair(self) -> ConnectionConfig:
        """Reject a username without password and vice versa."""
        if (self.username is None) != (self.password is None):
            raise ValueError("username and password must be provided together")
        return self

    @property
    def credentials(self) -> tuple[str, str] | None:
        """Return (username, password) when both are set, else None."""
        if self.username is not None and self.password is not None:
            return (self.username, self.password)
        return None

    def __repr__(self) -> str:
        """Return string representation with password redacted.

        Example:
            >>> config = ConnectionConfig(server_host="smtp.example.com", username="u", password="secret123")
            >>> "secret123" in repr(config)
            False
            >>> "[REDACTED]" in repr(config)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"ConnectionConfig({', '.join(fields)})"


@dataclass(frozen=True, slots=True)
class ConnectionOverrides:
    """Per-call values; None (or a blank string) means "use the default"."""

    server_host: str | None = None
    port: int | None = None
    use_tls: bool | None = None
    username: str | None = None
    password: str | None = None
    timeout: float | None = None


def _checked(field: str, adapter: TypeAdapter[Any], *, allow_bool: bool = False) -> Callable[[object], Any]:
    """Wrap a TypeAdapter so failures surface as InvalidConfigError(field).

    Pydantic's lax mode reads True as 1, so booleans are refused unless
    the field itself is a flag.
    """

    def _parse(value: object) -> Any:
        if isinstance(value, bool) and not allow_bool:
            raise InvalidConfigError(field, f"{value!r} (a boolean is not a number)")
        try:
            return adapter.validate_python(value)
        except ValidationError as exc:
            cause = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            raise InvalidConfigError(field, f"{value!r} ({cause})") from exc

    return _parse


def _parse_server(value: object) -> str:
    host = str(value).strip()
    if _HOST_WITH_PORT.match(host):
        raise InvalidConfigError("server", f"{host!r} carries a port suffix; set the port separately")
    try:
        validate_smtp_host(host)
    except ValueError as exc:
        raise InvalidConfigError("server", exc) from exc
    return host


def _parse_text(value: object) -> str:
    return str(value)


def _given(value: Any) -> Any:
    """Treat blank override strings as not supplied."""
    return None if is_blank(value) else value


def resolve_connection_config(overrides: ConnectionOverrides, settings: SettingsSource) -> ConnectionConfig:
    """Merge overrides with configured defaults into a ConnectionConfig.

    Args:
        overrides: Explicit per-call values.
        settings: Read-only defaults source (registry, environment, or fake).

    Returns:
        Complete, validated connection configuration.

    Raises:
        MissingConfigError: No server override and no configured server.
        InvalidConfigError: A port, tls, timeout, or server value is malformed.
        IncompleteCredentialsError: Exactly one of username/password resolved.

    Example:
        >>> from smtp_dispatch.adapters.memory.settings import InMemorySettingsSource
        >>> source = InMemorySettingsSource({"server": "smtp.example.com", "port": "2525"})
        >>> config = resolve_connection_config(ConnectionOverrides(use_tls=False), source)
        >>> config.server_host, config.port, config.use_tls
        ('smtp.example.com', 2525, False)
    """
    server_host = resolve_with_fallback(_given(overrides.server_host), settings.get("server"), parse=_parse_server)
    if server_host is None:
        raise MissingConfigError("server")

    port: int = resolve_with_fallback(overrides.port, settings.get("port"), DEFAULT_PORT, parse=_checked("port", _PORT))
    use_tls: bool = resolve_with_fallback(
        overrides.use_tls, settings.get("tls"), DEFAULT_USE_TLS, parse=_checked("tls", _TLS, allow_bool=True)
    )
    timeout: float = resolve_with_fallback(
        overrides.timeout, settings.get("timeout"), DEFAULT_TIMEOUT, parse=_checked("timeout", _TIMEOUT)
    )
    username = resolve_with_fallback(_given(overrides.username), settings.get("username"), parse=_parse_text)
    password = resolve_with_fallback(_given(overrides.password), settings.get("password"), parse=_parse_text)

    if username is not None and password is None:
        raise IncompleteCredentialsError("password")
    if password is not None and username is None:
        raise IncompleteCredentialsError("username")

    return ConnectionConfig(
        server_host=server_host,
        port=port,
        use_tls=use_tls,
        username=username,
        password=password,
        timeout=timeout,
    )


__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USE_TLS",
    "ConnectionConfig",
    "ConnectionOverrides",
    "resolve_connection_config",
]
