"""Input source resolution: positional ids or a normalized batch file."""

import os
import sys
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from .logger import ConsoleLogger
from .models import DEFAULT_BATCH_FILE, InputSource
from .paths import TemporaryWorkspace

STDIN_NAME = "-"
NORMALIZED_NAME = "source"

# Undecodable bytes survive the round trip into the normalized file
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def normalize_line(line: str) -> str:
    """Drop anything after ``#`` and trim surrounding whitespace."""
    comment = line.find("#")
    if comment != -1:
        line = line[:comment]
    return line.strip()


def normalize_lines(lines: Iterable[str]) -> List[str]:
    """Normalize batch file content, discarding lines left empty."""
    normalized: List[str] = []
    for line in lines:
        cleaned = normalize_line(line)
        if cleaned:
            normalized.append(cleaned)
    return normalized


def batch_candidates(script_name: str, playlist: str) -> List[str]:
    """Conventional batch files in priority order, without duplicates.

    The mode-named file (``audio.txt``) is preferred over the generic
    ``download.txt``; the playlist file is the last resort.
    """
    candidates: List[str] = []
    for name in (f"{script_name}.txt", DEFAULT_BATCH_FILE, playlist):
        if name and name not in candidates:
            candidates.append(name)
    return candidates


def _read_lines(path: str, logger: ConsoleLogger) -> Optional[List[str]]:
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS) as handle:
            return handle.readlines()
    except OSError as exc:
        logger.debug(f"skipping unreadable batch file {path}: {exc}")
        return None


def read_stream_lines(stream: TextIO) -> List[str]:
    """Read all lines from *stream*, decoding raw bytes leniently when possible."""
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream.readlines()
    return [line.decode(ENCODING, ENCODING_ERRORS) for line in buffer.readlines()]


def find_batch_lines(
    candidates: Sequence[str],
    cwd: str,
    stdin: Optional[TextIO] = None,
    logger: Optional[ConsoleLogger] = None,
) -> Tuple[str, List[str]]:
    """Return ``(origin, lines)`` for the first readable candidate.

    Relative candidates are looked up in *cwd*. When none can be read the
    lines come from standard input and the origin is ``-``.
    """
    logger = logger or ConsoleLogger()
    for name in candidates:
        path = os.path.join(cwd, os.path.expanduser(name))
        lines = _read_lines(path, logger)
        if lines is not None:
            logger.trace(f"batch file = {path}")
            return name, lines
        logger.trace(f"no batch file at {path}")

    stream = stdin if stdin is not None else sys.stdin
    logger.trace("reading ids from standard input")
    return STDIN_NAME, read_stream_lines(stream)


def resolve_input_source(
    ids: Sequence[str],
    script_name: str,
    playlist: str,
    workspace: TemporaryWorkspace,
    cwd: str,
    stdin: Optional[TextIO] = None,
    logger: Optional[ConsoleLogger] = None,
) -> InputSource:
    """Decide where the ids to download come from.

    Positional ids are passed through verbatim. Otherwise the winning batch
    file (or standard input) is normalized into the workspace and handed to
    yt-dlp as ``--batch-file``.
    """
    if ids:
        return InputSource(ids=tuple(ids))

    origin, lines = find_batch_lines(
        batch_candidates(script_name, playlist), cwd, stdin=stdin, logger=logger
    )
    normalized = normalize_lines(lines)

    path = workspace.file(NORMALIZED_NAME)
    with open(path, "w", encoding=ENCODING, errors=ENCODING_ERRORS) as handle:
        for entry in normalized:
            handle.write(f"{entry}\n")

    return InputSource(batch_file=path, origin=origin)
