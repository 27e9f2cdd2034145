"""Root CLI command group and global option handling.

Contents:
    * :func:`cli` - Root command group with ``--traceback``, ``--profile``,
      ``--set`` and ``--defaults-from``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import rich_click as click
from lib_layered_config import Config

from smtp_dispatch import __init__conf__
from smtp_dispatch.adapters.config.overrides import apply_overrides
from smtp_dispatch.domain.enums import SettingsBackend

from .constants import CLICK_CONTEXT_SETTINGS
from .context import CLIContext, TracebackState

if TYPE_CHECKING:
    from smtp_dispatch.composition import AppServices


def _apply_cli_overrides(config: Config, set_overrides: tuple[str, ...]) -> Config:
    """Apply ``--set`` overrides to a Config, raising UsageError on failure."""
    try:
        return apply_overrides(config, set_overrides)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Load configuration from a named profile (e.g., 'production', 'test')",
)
@click.option(
    "--set",
    "set_overrides",
    multiple=True,
    default=(),
    metavar="SECTION.KEY=VALUE",
    help="Override a configuration setting (repeatable).",
)
@click.option(
    "--defaults-from",
    "defaults_from",
    type=click.Choice([b.value for b in SettingsBackend], case_sensitive=False),
    default=SettingsBackend.REGISTRY.value,
    show_default=True,
    help="Read SMTP defaults from the [smtp] config section (registry) or SMTP_* environment variables",
)
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    profile: str | None,
    set_overrides: tuple[str, ...],
    defaults_from: str,
) -> None:
    """Root command storing global flags and syncing shared traceback state.

    Loads configuration once with the profile, applies any ``--set`` overrides,
    initializes logging and stores everything in the Click context.

    Example:
        >>> from click.testing import CliRunner
        >>> from smtp_dispatch.composition import build_testing
        >>> result = CliRunner().invoke(cli, ["info"], obj=build_testing)
        >>> result.exit_code
        0
    """
    # ctx.obj is always the services factory (production or test)
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    config = services.get_config(profile=profile)
    config = _apply_cli_overrides(config, set_overrides)
    services.init_logging(config)
    CLIContext(
        traceback=traceback,
        config=config,
        services=services,
        profile=profile,
        set_overrides=set_overrides,
        settings_backend=SettingsBackend(defaults_from.lower()),
    ).attach(ctx)
    TracebackState.requested(traceback).apply()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Deferred import: command modules import from package ancestors that import this module.
def _register_commands() -> None:
    from .commands import cli_config, cli_info, cli_send

    for cmd in (cli_send, cli_config, cli_info):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
