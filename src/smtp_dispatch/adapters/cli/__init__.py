"""CLI package providing the ``smtp-dispatch`` command-line interface.

Contents:
    * Per-invocation state and traceback flags from :mod:`.context`
    * Exit codes and their mapping from :mod:`.exit_codes`
    * Root command group from :mod:`.root`
    * Entry point from :mod:`.main`
    * Command functions from :mod:`.commands`
"""

from __future__ import annotations

from .commands import cli_config, cli_info, cli_send
from .constants import CLICK_CONTEXT_SETTINGS, TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import CLIContext, TracebackState, get_cli_context
from .exit_codes import ExitCode, exit_code_for
from .main import main
from .root import cli

__all__ = [
    # Constants
    "CLICK_CONTEXT_SETTINGS",
    "TRACEBACK_SUMMARY_LIMIT",
    "TRACEBACK_VERBOSE_LIMIT",
    "ExitCode",
    "exit_code_for",
    # Context
    "CLIContext",
    "TracebackState",
    "get_cli_context",
    # Root command
    "cli",
    # Entry point
    "main",
    # Commands
    "cli_config",
    "cli_info",
    "cli_send",
]
