"""Console-script entry point.

:func:`main` runs the Click group in non-standalone mode and turns every
outcome into an integer exit status. Shared traceback flags are restored
and the logging runtime is drained afterwards.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
import lib_cli_exit_tools

from smtp_dispatch import __init__conf__
from smtp_dispatch.adapters.logging.setup import shutdown_logging
from smtp_dispatch.domain.errors import SmtpDispatchError

from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import TracebackState
from .exit_codes import exit_code_for

if TYPE_CHECKING:
    from smtp_dispatch.composition import AppServices


@contextmanager
def _cli_session(*, restore_traceback: bool) -> Iterator[None]:
    previous = TracebackState.capture()
    try:
        yield
    finally:
        if restore_traceback:
            previous.apply()
        shutdown_logging()


def _report_failure(exc: BaseException) -> int:
    """Print the exception the way lib_cli_exit_tools does and pick an exit code."""
    state = TracebackState.requested(TracebackState.capture().enabled)
    state.apply()
    length_limit = TRACEBACK_VERBOSE_LIMIT if state.enabled else TRACEBACK_SUMMARY_LIMIT
    lib_cli_exit_tools.print_exception_message(trace_back=state.enabled, length_limit=length_limit)
    if isinstance(exc, SmtpDispatchError):
        return int(exit_code_for(exc))
    return lib_cli_exit_tools.get_system_exit_code(exc)


def _run_cli(argv: Sequence[str] | None, *, services_factory: Callable[[], AppServices]) -> int:
    from .root import cli

    # Click is invoked directly; lib_cli_exit_tools.run_cli cannot hand the services factory to ctx.obj.
    try:
        cli.main(
            args=list(argv) if argv is not None else sys.argv[1:],
            prog_name=__init__conf__.shell_command,
            obj=services_factory,
            standalone_mode=False,
        )
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except BaseException as exc:  # CLI boundary: SystemExit and KeyboardInterrupt included
        return _report_failure(exc)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run ``smtp-dispatch`` and return its exit status.

    Args:
        argv: Arguments without the program name; None reads ``sys.argv``.
        restore_traceback: Put the traceback flags back as they were.
        services_factory: Usually ``build_production``; tests pass their own.

    Raises:
        ValueError: If services_factory is not provided.

    Example:
        >>> from smtp_dispatch.composition import build_testing
        >>> main(["info"], services_factory=build_testing)  # doctest: +SKIP
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required. Pass build_production from composition layer.")

    with _cli_session(restore_traceback=restore_traceback):
        return _run_cli(argv, services_factory=services_factory)


__all__ = ["main"]
