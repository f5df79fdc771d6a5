"""Operating mode resolution from the invoked name and mode overrides."""

import os
from typing import Optional

from .errors import UsageError
from .models import MODE_CHOICES, OperatingMode


def script_name_from_argv0(argv0: str) -> str:
    """Return the invoked program name, lower-cased and without its suffix.

    ``/usr/local/bin/Audio.sh`` becomes ``audio``.
    """
    base = os.path.basename(argv0 or "")
    stem, _ext = os.path.splitext(base)
    return (stem or base).lower()


def mode_from_name(name: str) -> OperatingMode:
    """Map an invoked program name onto a mode, defaulting to ``custom``."""
    try:
        return OperatingMode(name)
    except ValueError:
        return OperatingMode.CUSTOM


def resolve_mode(
    script_name: str,
    script_override: Optional[str] = None,
    action: Optional[str] = None,
) -> OperatingMode:
    """Compute the operating mode.

    Action flags (``--list-formats`` and friends) win over everything, then an
    explicit ``--script``/``SCRIPT`` override, then the invoked name. Unknown
    invoked names become ``custom``; an unknown explicit override is a usage
    error rather than a silent fallback.
    """
    if action:
        return OperatingMode(action)

    if script_override:
        override = script_override.strip().lower()
        if override not in MODE_CHOICES:
            raise UsageError(
                f"unknown script '{script_override}' (choose from {', '.join(MODE_CHOICES)})"
            )
        return OperatingMode(override)

    return mode_from_name(script_name)
