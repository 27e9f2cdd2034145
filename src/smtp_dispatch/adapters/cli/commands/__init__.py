"""CLI command implementations registered on the root group.

Contents:
    * :func:`cli_send` from :mod:`.send`
    * :func:`cli_config` from :mod:`.config`
    * :func:`cli_info` from :mod:`.info`
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .send import cli_send

__all__ = [
    "cli_config",
    "cli_info",
    "cli_send",
]
