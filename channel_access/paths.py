"""Library directory, target path and temporary workspace handling."""

import os
import shutil
import tempfile
from typing import Mapping, Optional

from .logger import ConsoleLogger
from .models import (
    DEFAULT_MOVIES_DIR,
    DEFAULT_MUSIC_DIR,
    ENV_MOVIES,
    ENV_MUSIC,
    MUSIC_MODES,
    OperatingMode,
)

EXPLICIT_PATH_PREFIXES = ("/", ".", "~")


def resolve_home(mode: OperatingMode, environ: Mapping[str, str], user_home: str) -> str:
    """Return the library base directory for *mode*.

    Audio and playlist-export modes live under the music library, everything
    else under the movies library. ``MUSIC`` and ``MOVIES`` override the
    defaults.
    """
    if mode in MUSIC_MODES:
        override = (environ.get(ENV_MUSIC) or "").strip()
        return override or os.path.join(user_home, DEFAULT_MUSIC_DIR)

    override = (environ.get(ENV_MOVIES) or "").strip()
    return override or os.path.join(user_home, DEFAULT_MOVIES_DIR)


def is_within(path: str, base: str) -> bool:
    """True when *path* is *base* or one of its descendants."""
    base = base.rstrip("/") or "/"
    if path == base:
        return True
    prefix = base if base.endswith("/") else base + "/"
    return path.startswith(prefix)


def resolve_target(target: Optional[str], home: str, cwd: str) -> str:
    """Compute the download directory.

    Targets starting with ``/``, ``.`` or ``~`` are used as given; any other
    target is taken relative to *home*. Without a target we stay in the
    current directory if it is already inside the library.
    """
    if target:
        if target.startswith(EXPLICIT_PATH_PREFIXES):
            return target
        return os.path.join(home, target)

    if is_within(cwd, home):
        return cwd
    return home


def ensure_directory(path: str, logger: ConsoleLogger, cwd: Optional[str] = None) -> None:
    """Create *path* if needed, reporting (not raising) failures.

    Relative paths are taken from *cwd* when one is given.
    """
    directory = os.path.expanduser(path)
    if cwd:
        directory = os.path.join(cwd, directory)
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as exc:
        logger.warning(f"Failed to create directory {path}: {exc}")


class TemporaryWorkspace:
    """Scratch directory owned by a single invocation.

    The directory is removed on exit unless *keep* is set, which debug mode
    uses so the normalized batch file can be inspected afterwards.
    """

    def __init__(self, prefix: str, keep: bool = False, logger: Optional[ConsoleLogger] = None) -> None:
        self.prefix = prefix
        self.keep = keep
        self.path: Optional[str] = None
        self._logger = logger or ConsoleLogger()

    def __enter__(self) -> "TemporaryWorkspace":
        self.path = tempfile.mkdtemp(prefix=f"{self.prefix}.")
        self._logger.trace(f"workspace = {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self.path and not self.keep:
            shutil.rmtree(self.path, ignore_errors=True)
        elif self.path:
            self._logger.debug(f"keeping workspace {self.path}")
        return False

    def file(self, name: str) -> str:
        if self.path is None:
            raise RuntimeError("workspace has not been created")
        return os.path.join(self.path, name)
