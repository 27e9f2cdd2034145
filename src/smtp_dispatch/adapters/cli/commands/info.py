"""``info`` command: package metadata and where SMTP defaults come from."""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from smtp_dispatch import __init__conf__
from smtp_dispatch.adapters.config.loader import get_default_config_path
from smtp_dispatch.adapters.config.sources import ENVIRONMENT_KEYS, REGISTRY_SECTION
from smtp_dispatch.domain.enums import SettingsBackend

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context

logger = logging.getLogger(__name__)


def _defaults_source_lines(cli_ctx: CLIContext) -> list[str]:
    lines = ["", f"SMTP defaults ({cli_ctx.settings_backend.value}):", ""]
    if cli_ctx.settings_backend is SettingsBackend.ENVIRONMENT:
        lines.extend(f"    {key.ljust(12)} <- ${name}" for key, name in ENVIRONMENT_KEYS.items())
    else:
        lines.append(f"    section      = [{REGISTRY_SECTION}]")
        lines.append(f"    profile      = {cli_ctx.profile or '-'}")
        lines.append(f"    defaults     = {get_default_config_path()}")
    return lines


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Print installation metadata and the active SMTP defaults source.

    Example:
        >>> from click.testing import CliRunner
        >>> from smtp_dispatch.adapters.cli.root import cli
        >>> from smtp_dispatch.composition import build_testing
        >>> result = CliRunner().invoke(cli, ["--defaults-from", "environment", "info"], obj=build_testing)
        >>> "$SMTP_SERVER" in result.output
        True
    """
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-info", extra={"command": "info"}):
        logger.info("Displaying package information")
        __init__conf__.print_info()
        click.echo("\n".join(_defaults_source_lines(cli_ctx)))


__all__ = ["cli_info"]
