"""Configuration adapter - loading, settings sources, display, and overrides.

Contents:
    * :mod:`.loader` - Layered configuration loading with caching
    * :mod:`.sources` - Registry and environment settings sources
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.overrides` - CLI ``--set`` override parsing and application
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path
from .overrides import apply_overrides
from .sources import EnvironmentSettingsSource, LayeredSettingsSource, get_settings_source

__all__ = [
    "EnvironmentSettingsSource",
    "LayeredSettingsSource",
    "apply_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
    "get_settings_source",
]
