"""Run yt-dlp for an assembled command."""

import sys
from typing import Callable, Sequence

import yt_dlp
from yt_dlp.version import __version__ as YT_DLP_VERSION

from .models import DOWNLOADER

Runner = Callable[[Sequence[str]], int]


def exit_status(code) -> int:
    """Translate a ``SystemExit`` code into a process exit status."""
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    # yt-dlp exits with a message string on fatal option errors
    print(code, file=sys.stderr)
    return 1


def run_downloader(command: Sequence[str]) -> int:
    """Run yt-dlp in-process and return its exit status.

    *command* is the full token list including the leading ``yt-dlp``;
    output and errors are left entirely to yt-dlp.
    """
    argv = list(command)
    if argv and argv[0] == DOWNLOADER:
        argv = argv[1:]
    try:
        yt_dlp.main(argv)
    except SystemExit as exc:
        return exit_status(exc.code)
    return 0


def downloader_version() -> str:
    return YT_DLP_VERSION
