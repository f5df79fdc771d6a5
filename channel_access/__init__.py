"""YouTube channel access wrapper around yt-dlp."""

# Import main components for easier access
from .actions import dispatch, extract_id, find_duplicates, find_ids
from .cli import main
from .config import build_parser, parse_args, positive_int, resolve_config
from .errors import UsageError
from .formats import select_format
from .identity import resolve_mode, script_name_from_argv0
from .logger import ConsoleLogger
from .models import VERSION, InputSource, OperatingMode, ResolvedConfig
from .paths import TemporaryWorkspace, resolve_home, resolve_target
from .runner import run_downloader
from .sources import normalize_lines, resolve_input_source
from .ytdlp_options import build_download_command, build_list_formats_command

__all__ = [
    # Main entry points
    "main",
    "dispatch",
    "parse_args",
    "resolve_config",
    "build_parser",
    # Resolvers
    "resolve_mode",
    "script_name_from_argv0",
    "resolve_home",
    "resolve_target",
    "select_format",
    "resolve_input_source",
    "normalize_lines",
    # Actions
    "find_ids",
    "find_duplicates",
    "extract_id",
    # Command assembly
    "build_download_command",
    "build_list_formats_command",
    "run_downloader",
    # Models and data structures
    "InputSource",
    "OperatingMode",
    "ResolvedConfig",
    "TemporaryWorkspace",
    "ConsoleLogger",
    "UsageError",
    # Configuration
    "positive_int",
    "VERSION",
]
