"""Layered configuration loading for the SMTP defaults registry.

:data:`get_config` is the process-wide loader. It reads the bundled
``defaultconfig.toml`` plus the app, host, user, dotenv and environment
layers through lib_layered_config and keeps the result per profile, since
relay defaults are set administratively and do not change during a send.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from smtp_dispatch import __init__conf__

_BUNDLED_DEFAULTS = Path(__file__).parent / "defaultconfig.toml"


def validate_profile(profile: str, max_length: int = DEFAULT_MAX_PROFILE_LENGTH) -> None:
    """Refuse profile names that cannot serve as a single directory name.

    Raises:
        ValueError: Empty, too long, or containing path separators.

    Examples:
        >>> validate_profile("production")

        >>> validate_profile("../etc/passwd")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../etc/passwd
    """
    validate_profile_name(profile, max_length=max_length)


def get_default_config_path() -> Path:
    """Return the bundled ``defaultconfig.toml`` documenting ``[smtp]``.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return _BUNDLED_DEFAULTS


class LayeredConfigLoader:
    """Callable loader with one cached Config per ``(profile, start_dir)``.

    Satisfies the ``GetConfig`` port. ``cache_clear`` forces the next call
    to re-read every layer.

    Example:
        >>> loader = LayeredConfigLoader(vendor="acme", app="relay", slug="relay")
        >>> loader.default_file.name
        'defaultconfig.toml'
    """

    def __init__(
        self,
        *,
        vendor: str,
        app: str,
        slug: str,
        default_file: Path | None = None,
        cache_size: int = 4,
    ) -> None:
        self.vendor = vendor
        self.app = app
        self.slug = slug
        self.default_file = default_file if default_file is not None else get_default_config_path()
        self._load = lru_cache(maxsize=cache_size)(self._read)

    def _read(self, profile: str | None, start_dir: str | None) -> Config:
        return read_config(
            vendor=self.vendor,
            app=self.app,
            slug=self.slug,
            profile=profile,
            default_file=self.default_file,
            start_dir=start_dir,
        )

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config:
        """Return the merged configuration for ``profile``.

        Args:
            profile: Inserts ``profile/<name>/`` into every config path.
            start_dir: Directory where ``.env`` discovery starts; the
                current directory when None.

        Raises:
            ValueError: When ``profile`` is not a usable name.
        """
        if profile is not None:
            validate_profile(profile)
        return self._load(profile, start_dir)

    def cache_clear(self) -> None:
        self._load.cache_clear()


get_config = LayeredConfigLoader(
    vendor=__init__conf__.LAYEREDCONF_VENDOR,
    app=__init__conf__.LAYEREDCONF_APP,
    slug=__init__conf__.LAYEREDCONF_SLUG,
)


__all__ = [
    "LayeredConfigLoader",
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
