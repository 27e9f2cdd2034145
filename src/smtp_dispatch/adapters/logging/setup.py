"""lib_log_rich bootstrap for the CLI and ``python -m smtp_dispatch``.

The send pipeline only logs through stdlib ``logging``. This module turns the
``[lib_log_rich]`` config section into a runtime, bridges stdlib records into
it and masks SMTP credentials in structured ``extra`` fields.

Contents:
    * :class:`LoggingConfigModel`: typed view of ``[lib_log_rich]``.
    * :func:`init_logging`: idempotent start-up.
    * :func:`shutdown_logging`: drain and stop the runtime on exit.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Final

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict, Field

from smtp_dispatch import __init__conf__

#: ``extra`` field name -> regex whose matches are replaced by ``***``.
SMTP_SCRUB_PATTERNS: Final[Mapping[str, str]] = {
    "password": ".+",
    "smtp_password": ".+",
    "credentials": ".+",
}


class LoggingConfigModel(BaseModel):
    """The ``[lib_log_rich]`` section as read from layered config.

    Unknown keys are forwarded to ``RuntimeConfig`` untouched, so every
    lib_log_rich option stays configurable from TOML.

    Example:
        >>> section = LoggingConfigModel.model_validate({"environment": "staging", "console_level": "debug"})
        >>> section.environment, section.console_level, section.service
        ('staging', 'debug', None)
    """

    model_config = ConfigDict(extra="allow")

    service: str | None = None
    environment: str = "prod"
    console_level: str | None = None
    scrub_patterns: dict[str, str] = Field(default_factory=dict)

    def scrubbing(self) -> dict[str, str]:
        """Built-in credential patterns overlaid with the configured ones.

        Example:
            >>> LoggingConfigModel(scrub_patterns={"token": ".+"}).scrubbing()["token"]
            '.+'
            >>> LoggingConfigModel().scrubbing()["password"]
            '.+'
        """
        return {**SMTP_SCRUB_PATTERNS, **self.scrub_patterns}


def _build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    """Translate ``[lib_log_rich]`` into a RuntimeConfig named after the package by default."""
    section: object = config.get("lib_log_rich", default={})
    parsed = LoggingConfigModel.model_validate(section if isinstance(section, Mapping) else {})
    passthrough = parsed.model_dump(exclude={"service", "environment", "scrub_patterns"}, exclude_none=True)

    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment,
        scrub_patterns=parsed.scrubbing(),
        **passthrough,
    )


def init_logging(config: Config) -> None:
    """Start lib_log_rich and attach stdlib logging, once per process.

    The first call also enables ``.env`` loading so ``LOG_*`` variables from
    dotenv files apply. Later calls return immediately.

    Example:
        >>> init_logging(Config({"lib_log_rich": {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(_build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


def shutdown_logging() -> None:
    """Flush and stop the runtime; a no-op off the main thread or before init."""
    if threading.current_thread() is not threading.main_thread():
        return
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.shutdown()


__all__ = [
    "SMTP_SCRUB_PATTERNS",
    "LoggingConfigModel",
    "init_logging",
    "shutdown_logging",
]
