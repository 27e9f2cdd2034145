"""Outcome of a single send."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

_POSITIVE_COMPLETION_CLASS = 2


@dataclass(frozen=True, slots=True)
class SendResult:
    """Reply of the relay to the submitted message.

    Example:
        >>> result = SendResult.from_reply(250, ["2.0.0 Ok: queued"])
        >>> result.succeeded, result.code, result.detail
        (True, '250', '2.0.0 Ok: queued')
    """

    succeeded: bool
    code: str
    detail: str

    @classmethod
    def from_reply(cls, code: int, lines: Iterable[str]) -> SendResult:
        """Classify an SMTP reply; 2xx codes are positive completion."""
        return cls(
            succeeded=is_positive_completion(code),
            code=str(code),
            detail="; ".join(line for line in lines if line),
        )


def is_positive_completion(code: int) -> bool:
    """Return True for reply codes in the 2xx class.

    Example:
        >>> is_positive_completion(250), is_positive_completion(354), is_positive_completion(550)
        (True, False, False)
    """
    return code // 100 == _POSITIVE_COMPLETION_CLASS


__all__ = ["SendResult", "is_positive_completion"]
