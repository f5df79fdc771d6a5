"""Default format selection per operating mode."""

from typing import Optional

from .models import (
    BEST_FORMAT,
    DEFAULT_LANGUAGE,
    PODCAST_FORMAT,
    YOUTUBE_FORMAT,
    OperatingMode,
)


def default_format(key: str, language: Optional[str] = None) -> str:
    """Return the canned format selector for a mode or quality name."""
    normalized = (key or "").strip().lower()
    if normalized in (OperatingMode.PODCAST.value, OperatingMode.AUDIO.value):
        return PODCAST_FORMAT
    if normalized == OperatingMode.YOUTUBE.value:
        return YOUTUBE_FORMAT.format(language=language or DEFAULT_LANGUAGE)
    return BEST_FORMAT


def select_format(
    explicit: Optional[str],
    quality: Optional[str],
    mode: OperatingMode,
    language: Optional[str] = None,
) -> str:
    """Pick the format selector handed to yt-dlp.

    An explicit format is passed through untouched; yt-dlp is the one that
    understands the syntax. Otherwise the quality name, or failing that the
    mode, picks one of the canned selectors.
    """
    if explicit:
        return explicit
    return default_format(quality or mode.value, language)
