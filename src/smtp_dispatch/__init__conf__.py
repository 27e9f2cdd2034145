"""Static package metadata surfaced to CLI commands and configuration paths.

The version string is kept in sync with ``pyproject.toml``.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "smtp_dispatch"
#: Human-readable summary shown in CLI help output.
title = "Send email through an SMTP relay using layered configuration defaults"
#: Current release version.
version = "0.1.0"
#: Console-script name published by the package.
shell_command = "smtp-dispatch"

#: Vendor identifier for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_VENDOR: str = "smtp-dispatch"
#: Application name for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_APP: str = "smtp-dispatch"
#: Configuration slug for lib_layered_config Linux paths and environment variables.
LAYEREDCONF_SLUG: str = "smtp-dispatch"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for smtp_dispatch:
        ...
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
        ("config_slug", LAYEREDCONF_SLUG),
    )
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
