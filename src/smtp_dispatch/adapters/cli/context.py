"""Per-invocation CLI state shared between the root group and its commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

from smtp_dispatch.adapters.config.overrides import apply_overrides
from smtp_dispatch.domain.enums import SettingsBackend

if TYPE_CHECKING:
    from smtp_dispatch.application.ports import SettingsSource
    from smtp_dispatch.composition import AppServices


@dataclass(frozen=True, slots=True)
class TracebackState:
    """lib_cli_exit_tools traceback flags, captured or about to be applied.

    Example:
        >>> previous = TracebackState.capture()
        >>> TracebackState.requested(True).apply()
        >>> TracebackState.capture().enabled
        True
        >>> previous.apply()
        >>> TracebackState.capture() == previous
        True
    """

    enabled: bool = False
    force_color: bool = False

    @classmethod
    def capture(cls) -> TracebackState:
        config = lib_cli_exit_tools.config
        return cls(
            enabled=bool(getattr(config, "traceback", False)),
            force_color=bool(getattr(config, "traceback_force_color", False)),
        )

    @classmethod
    def requested(cls, enabled: bool) -> TracebackState:
        """Verbose tracebacks are always colored; summaries never are."""
        return cls(enabled=bool(enabled), force_color=bool(enabled))

    def apply(self) -> None:
        lib_cli_exit_tools.config.traceback = self.enabled
        lib_cli_exit_tools.config.traceback_force_color = self.force_color


@dataclass(slots=True)
class CLIContext:
    """Root-group results every subcommand reads.

    Attributes:
        traceback: Whether ``--traceback`` was given.
        config: Layered configuration with ``--set`` overrides applied.
        services: Adapters wired by the composition root.
        profile: Root ``--profile``, if any.
        set_overrides: Raw ``--set`` strings, reapplied when a command
            reloads configuration for another profile.
        settings_backend: Where ``send`` reads its SMTP defaults from.
    """

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None
    set_overrides: tuple[str, ...] = ()
    settings_backend: SettingsBackend = SettingsBackend.REGISTRY

    def attach(self, ctx: click.Context) -> None:
        """Make this state the Click context's ``obj``.

        Example:
            >>> from unittest.mock import MagicMock
            >>> from smtp_dispatch.composition import build_testing
            >>> ctx = MagicMock()
            >>> CLIContext(traceback=True, config=Config({}, {}), services=build_testing()).attach(ctx)
            >>> ctx.obj.settings_backend.value
            'registry'
        """
        ctx.obj = self

    def settings_source(self) -> SettingsSource:
        """The defaults source selected with ``--defaults-from``."""
        return self.services.get_settings_source(self.config, self.settings_backend)

    def config_for(self, profile: str | None) -> tuple[Config, str | None]:
        """Return the configuration for a command-level ``--profile``.

        Without one, the root configuration is reused. Otherwise the profile
        is loaded fresh and the root ``--set`` overrides are applied again.
        """
        if not profile:
            return self.config, self.profile
        reloaded = self.services.get_config(profile=profile)
        return apply_overrides(reloaded, self.set_overrides), profile


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Return the state the root group attached to ``ctx``.

    Raises:
        RuntimeError: The root group did not run first.
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("CLI context not initialized. The root group attaches it before any command runs.")
    return ctx.obj


__all__ = [
    "CLIContext",
    "TracebackState",
    "get_cli_context",
]
