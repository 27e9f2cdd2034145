"""Send CLI command.

Thin adapter over :func:`smtp_dispatch.adapters.email.sender.send_email`:
collects options, picks the configured defaults source and maps domain
errors onto exit codes.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable
from typing import NoReturn

import lib_log_rich.runtime
import rich_click as click

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode, exit_code_for

logger = logging.getLogger(__name__)


#: Exit code -> (log message, user-facing prefix).
_FAILURE_MESSAGES: dict[ExitCode, tuple[str, str]] = {
    ExitCode.CONFIG_ERROR: ("SMTP configuration error", "Configuration error"),
    ExitCode.INVALID_ARGUMENT: ("Invalid email parameters", "Invalid email parameters"),
    ExitCode.SMTP_FAILURE: ("SMTP delivery failed", "Failed to send email"),
    ExitCode.GENERAL_ERROR: ("Unexpected error sending email", "Unexpected error"),
}


def execute_with_send_error_handling(*, operation: Callable[[], str], recipients: list[str]) -> str:
    """Run a send operation, translating failures into ``SystemExit``.

    :func:`~smtp_dispatch.adapters.cli.exit_codes.exit_code_for` picks the
    code: configuration 78, message or address 22, delivery 69, anything
    else 1 (logged with traceback). Set ``DEVELOPMENT_MODE`` to re-raise
    unexpected exceptions instead.

    Returns:
        The reply code returned by ``operation``.
    """
    try:
        code = operation()
    except Exception as exc:
        exit_code = exit_code_for(exc)
        unexpected = exit_code is ExitCode.GENERAL_ERROR
        if unexpected and os.environ.get("DEVELOPMENT_MODE"):
            raise
        log_message, user_message = _FAILURE_MESSAGES[exit_code]
        _handle_send_error(exc, log_message, user_message, exit_code=exit_code, log_traceback=unexpected)
    logger.info("Email sent via CLI", extra={"recipients": recipients, "code": code})
    return code


def _handle_send_error(
    exc: Exception,
    log_message: str,
    user_message: str,
    *,
    exit_code: ExitCode,
    log_traceback: bool = False,
) -> NoReturn:
    logger.error(
        log_message,
        extra={"error": str(exc), "error_type": type(exc).__name__, "kind": getattr(exc, "kind", None)},
        exc_info=log_traceback,
    )
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    raise SystemExit(exit_code)


@click.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--to", "to", multiple=True, help="Recipient address or comma-separated list (repeatable)")
@click.option("--cc", default=None, help="Comma-separated carbon-copy addresses")
@click.option("--bcc", default=None, help="Comma-separated blind-copy addresses")
@click.option("--subject", required=True, help="Email subject line")
@click.option("--body", default="", help="Email body")
@click.option("--html", "is_html", is_flag=True, default=False, help="Send the body as text/html")
@click.option("--from", "from_address", default=None, help="Sender address (uses the configured default if omitted)")
@click.option("--keep-bcc", "keep_bcc_header", is_flag=True, default=False, help="Keep a visible Bcc header")
@click.option("--server", "server_host", default=None, help="Override SMTP relay host")
@click.option("--port", type=int, default=None, help="Override SMTP relay port")
@click.option("--tls/--no-tls", "tls", default=None, help="Override implicit-TLS (SMTPS) mode")
@click.option("--username", default=None, help="Override SMTP login user")
@click.option("--password", default=None, help="Override SMTP login password")
@click.option("--timeout", type=float, default=None, help="Socket timeout in seconds")
@click.pass_context
def cli_send(
    ctx: click.Context,
    to: tuple[str, ...],
    cc: str | None,
    bcc: str | None,
    subject: str,
    body: str,
    is_html: bool,
    from_address: str | None,
    keep_bcc_header: bool,
    server_host: str | None,
    port: int | None,
    tls: bool | None,
    username: str | None,
    password: str | None,
    timeout: float | None,
) -> None:
    """Send one email and print the relay's reply code.

    Unset options fall back to the defaults source chosen with the root
    ``--defaults-from`` option.
    """
    cli_ctx = get_cli_context(ctx)
    recipients = list(to)
    extra = {
        "command": "send",
        "recipients": recipients,
        "subject": subject,
        "defaults_from": cli_ctx.settings_backend.value,
    }

    with lib_log_rich.runtime.bind(job_id="cli-send", extra=extra):
        settings = cli_ctx.settings_source()
        code = execute_with_send_error_handling(
            operation=functools.partial(
                cli_ctx.services.send_email,
                subject=subject,
                body=body,
                to=recipients,
                is_html=is_html,
                from_address=from_address,
                cc=cc,
                bcc=bcc,
                server_host=server_host,
                port=port,
                tls=tls,
                username=username,
                password=password,
                timeout=timeout,
                keep_bcc_header=keep_bcc_header,
                settings=settings,
                transport_factory=cli_ctx.services.create_transport,
            ),
            recipients=recipients,
        )
        click.echo(code)


__all__ = ["cli_send", "execute_with_send_error_handling"]
