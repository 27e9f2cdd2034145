"""POSIX-conventional exit codes for CLI error paths.

Every ``SystemExit`` raised by a CLI command carries one of these values so
shell callers can tell a misconfigured relay from a rejected message.
"""

from __future__ import annotations

from enum import IntEnum

from smtp_dispatch.domain.errors import ConfigurationError, DeliveryError, MessageError


class ExitCode(IntEnum):
    """Exit codes following sysexits.h and errno conventions.

    * 0-1: generic success / failure
    * 22: EINVAL (bad argument or address)
    * 69: EX_UNAVAILABLE (relay unreachable or rejected the message)
    * 78: EX_CONFIG (missing or invalid SMTP settings)

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.SMTP_FAILURE)
        69
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENT = 22
    SMTP_FAILURE = 69
    CONFIG_ERROR = 78


def exit_code_for(exc: BaseException) -> ExitCode:
    """Classify a send failure.

    Malformed addresses raise a ``ValueError`` subclass, so plain
    ``ValueError`` counts as a bad argument too.

    Example:
        >>> from smtp_dispatch.domain.errors import MissingConfigError, SmtpRejectedError
        >>> exit_code_for(MissingConfigError("server")).name
        'CONFIG_ERROR'
        >>> exit_code_for(SmtpRejectedError("550", "no such user")).name
        'SMTP_FAILURE'
        >>> exit_code_for(RuntimeError("boom")).name
        'GENERAL_ERROR'
    """
    if isinstance(exc, ConfigurationError):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, (MessageError, ValueError)):
        return ExitCode.INVALID_ARGUMENT
    if isinstance(exc, DeliveryError):
        return ExitCode.SMTP_FAILURE
    return ExitCode.GENERAL_ERROR


__all__ = ["ExitCode", "exit_code_for"]
