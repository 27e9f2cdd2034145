"""``config`` command: show the SMTP defaults ``send`` would use.

By default the active defaults source (``--defaults-from``) is resolved
with no overrides and printed key by key with its origin; the command
exits 78 when those defaults cannot form a connection. ``--all`` or
``--section`` print the raw merged layered configuration instead.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from smtp_dispatch.adapters.config.display import build_settings_report, display_settings_report
from smtp_dispatch.domain.enums import OutputFormat

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    default=False,
    help="Print the whole merged configuration instead of the SMTP defaults",
)
@click.option(
    "--section",
    type=str,
    default=None,
    help="Print one section of the merged configuration (e.g. 'smtp', 'lib_log_rich')",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Override profile from root command (e.g., 'production', 'test')",
)
@click.pass_context
def cli_config(
    ctx: click.Context,
    output_format: str,
    show_all: bool,
    section: str | None,
    profile: str | None,
) -> None:
    """Show the effective SMTP defaults, or the merged configuration.

    Passwords are always masked.
    """
    cli_ctx = get_cli_context(ctx)
    fmt = OutputFormat(output_format.lower())
    extra = {"command": "config", "format": fmt.value, "defaults_from": cli_ctx.settings_backend.value}

    with lib_log_rich.runtime.bind(job_id="cli-config", extra=extra):
        if show_all or section:
            _show_layered(cli_ctx, fmt, section, profile)
        else:
            _show_smtp_defaults(cli_ctx, fmt, profile)


def _show_smtp_defaults(cli_ctx: CLIContext, fmt: OutputFormat, profile: str | None) -> None:
    config, _ = cli_ctx.config_for(profile)
    source = cli_ctx.services.get_settings_source(config, cli_ctx.settings_backend)
    report = build_settings_report(config, cli_ctx.settings_backend, source)
    logger.info("Displaying SMTP defaults", extra={"resolved": report.resolved, "unknown_keys": list(report.unknown_keys)})

    display_settings_report(report, output_format=fmt)
    if not report.resolved:
        raise SystemExit(ExitCode.CONFIG_ERROR)


def _show_layered(cli_ctx: CLIContext, fmt: OutputFormat, section: str | None, profile: str | None) -> None:
    config, effective_profile = cli_ctx.config_for(profile)
    logger.info("Displaying configuration", extra={"section": section, "profile": effective_profile})
    try:
        cli_ctx.services.display_config(config, output_format=fmt, section=section, profile=effective_profile)
    except ValueError as exc:
        click.echo(f"\nError: {exc}", err=True)
        raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


__all__ = ["cli_config"]
