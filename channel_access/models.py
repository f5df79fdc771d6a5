"""Data models, enums, and constants for the channel access wrapper."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


VERSION = "0.8.10"

DOWNLOADER = "yt-dlp"
COOKIES_BROWSER = "chrome"


class OperatingMode(Enum):
    """What this invocation does, derived from the invoked name or flags."""
    YOUTUBE = "youtube"
    PODCAST = "podcast"
    AUDIO = "audio"
    VIDEO = "video"
    LIST_FORMATS = "list-formats"
    DUPLICATES = "duplicates"
    FIND_IDS = "find-ids"
    JAVASCRIPT = "javascript"
    CUSTOM = "custom"


MODE_CHOICES: Tuple[str, ...] = tuple(
    mode.value for mode in OperatingMode if mode is not OperatingMode.CUSTOM
)

# Modes whose downloads land in the music library
MUSIC_MODES = frozenset({OperatingMode.AUDIO, OperatingMode.JAVASCRIPT})


# Environment variable names
ENV_FORMAT = "FORMAT"
ENV_QUALITY = "QUALITY"
ENV_SCRIPT = "SCRIPT"
ENV_FRAGMENTS = "FRAGMENTS"
ENV_PLAYLIST = "PLAYLIST"
ENV_TARGET = "TARGET"
ENV_ORDER = "ORDER"
ENV_SUBTITLES = "SUBTITLES"
ENV_CONFIG = "CONFIG"
ENV_MOVIES = "MOVIES"
ENV_MUSIC = "MUSIC"
ENV_DRYRUN = "DRYRUN"
ENV_DEBUG = "DEBUG"
ENV_QUIET = "QUIET"
ENV_VERBOSE = "VERBOSE"
ENV_HOME = "HOME"

# Defaults
DEFAULT_FRAGMENTS = 1
DEFAULT_PLAYLIST = "playlist.txt"
DEFAULT_BATCH_FILE = "download.txt"
DEFAULT_ORDER = "random"
DEFAULT_LANGUAGE = "en"
DEFAULT_SUBTITLES = "en"
DEFAULT_MUSIC_DIR = "Music"
DEFAULT_MOVIES_DIR = "Movies"

DEBUG_ON = "y"
DEBUG_TRACE = "trace"

# Canned format selectors
PODCAST_FORMAT = "[height<=480][ext=mp4]+bestaudio"
YOUTUBE_FORMAT = "best[height>=720][ext=mp4][language*={language}]"
BEST_FORMAT = "best"


@dataclass(frozen=True)
class InputSource:
    """Either a literal list of ids or a normalized batch file."""
    ids: Tuple[str, ...] = ()
    batch_file: Optional[str] = None
    origin: Optional[str] = None

    @property
    def is_batch(self) -> bool:
        return self.batch_file is not None

    def to_args(self) -> List[str]:
        """Render the source as downloader arguments."""
        if self.batch_file is not None:
            return ["--batch-file", self.batch_file]
        return ["--", *self.ids]

    def describe(self) -> str:
        if self.batch_file is not None:
            return self.origin or self.batch_file
        return " ".join(self.ids)


@dataclass
class ResolvedConfig:
    """Every setting collapsed to a single value.

    Fields are filled from command-line flags first, then environment
    variables, then built-in defaults. The derived fields at the bottom are
    populated once by the resolvers and then left alone.
    """
    script_name: str
    mode: OperatingMode
    format: Optional[str] = None
    quality: Optional[str] = None
    fragments: int = DEFAULT_FRAGMENTS
    playlist: str = DEFAULT_PLAYLIST
    target: Optional[str] = None
    order: str = DEFAULT_ORDER
    subtitles: Optional[str] = None
    language: Optional[str] = None
    debug: Optional[str] = None
    quiet: bool = False
    verbose: bool = False
    dry_run: bool = False
    config: Optional[str] = None
    ids: List[str] = field(default_factory=list)
    user_home: str = field(default_factory=lambda: os.path.expanduser("~"))
    cwd: str = field(default_factory=os.getcwd)

    # Derived
    home: Optional[str] = None
    target_path: Optional[str] = None
    effective_format: Optional[str] = None

    @property
    def tracing(self) -> bool:
        return self.debug == DEBUG_TRACE

    @property
    def output_level(self) -> Optional[str]:
        """Downloader verbosity flag, quiet winning over verbose."""
        if self.quiet:
            return "--quiet"
        if self.verbose or self.tracing:
            return "--verbose"
        return None
