"""Configuration and argument parsing for the channel access wrapper."""

import argparse
import os
from typing import Mapping, Optional, Sequence

from .errors import UsageError
from .formats import select_format
from .identity import resolve_mode, script_name_from_argv0
from .logger import ConsoleLogger
from .models import (
    DEBUG_ON,
    DEBUG_TRACE,
    DEFAULT_FRAGMENTS,
    DEFAULT_ORDER,
    DEFAULT_PLAYLIST,
    ENV_CONFIG,
    ENV_DEBUG,
    ENV_DRYRUN,
    ENV_FORMAT,
    ENV_FRAGMENTS,
    ENV_HOME,
    ENV_ORDER,
    ENV_PLAYLIST,
    ENV_QUALITY,
    ENV_QUIET,
    ENV_SCRIPT,
    ENV_SUBTITLES,
    ENV_TARGET,
    ENV_VERBOSE,
    MODE_CHOICES,
    OperatingMode,
    ResolvedConfig,
)
from .paths import resolve_home, resolve_target

EXAMPLES = """\
examples:
  kimono --format 18 -t Interesting/Science XXXXXXXXXXX XXXXXXXXXYY
  FORMAT="139+340" FRAGMENTS="2" PLAYLIST="catalog.out" kimono
  kimono --quality podcast XXXXXXXXXXX
  audio -p mixtape.txt
  cut -d, -f2 videos.csv | youtube
  DEBUG=y SCRIPT=video kimono XXXXXXXXXXX
  kimono --list-formats --playlist index.txt
  kimono --find-ids XXXXXXXXXXX XXXXXXXXXYY
  PLAYLIST="mixtape.txt" kimono --javascript
  kimono --duplicates -t Recent
"""


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises instead of exiting on bad input."""

    def error(self, message):
        raise UsageError(message)


def positive_int(value: str) -> int:
    """Return *value* parsed as a positive integer for argparse."""

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise argparse.ArgumentTypeError(
            "Expected a positive integer"
        ) from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("Expected a positive integer")

    return parsed


def build_parser(prog: Optional[str] = None) -> ArgumentParser:
    """Build the command-line parser.

    Short flags are mapped explicitly and long options may not be
    abbreviated.
    """
    parser = ArgumentParser(
        prog=prog,
        description="Download video and audio files from YouTube using yt-dlp.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("ids", nargs="*", help="Video or playlist ids to download")

    parser.add_argument("-f", "--format", default=None, help="Format selector passed to yt-dlp")
    parser.add_argument(
        "-q",
        "--quality",
        default=None,
        help="Pick a canned format by name (podcast, audio, youtube)",
    )
    parser.add_argument(
        "-s",
        "--script",
        choices=MODE_CHOICES,
        default=None,
        help="Override the mode implied by the program name",
    )
    parser.add_argument(
        "-p",
        "--playlist",
        default=None,
        help=f"Playlist file to read ids from (default: {DEFAULT_PLAYLIST})",
    )
    parser.add_argument(
        "-t",
        "--target",
        default=None,
        help="Download directory, relative to the library unless it starts with /, . or ~",
    )
    parser.add_argument(
        "--fragments",
        type=positive_int,
        default=None,
        help=f"Concurrent fragment downloads (default: {DEFAULT_FRAGMENTS})",
    )
    parser.add_argument(
        "--order",
        default=None,
        help=f"Playlist order; anything but 'random' keeps sequence (default: {DEFAULT_ORDER})",
    )
    parser.add_argument(
        "--random",
        dest="order",
        action="store_const",
        const="random",
        help="Shuffle playlist order",
    )
    parser.add_argument("--subtitles", default=None, help="Embed subtitles in these languages")
    parser.add_argument("--language", default=None, help="Audio language for the youtube format (default: en)")

    # Action flags share one destination so the last one given wins
    parser.add_argument(
        "-L",
        "--list-formats",
        dest="action",
        action="store_const",
        const=OperatingMode.LIST_FORMATS.value,
        help="List available formats instead of downloading",
    )
    parser.add_argument(
        "--duplicates",
        dest="action",
        action="store_const",
        const=OperatingMode.DUPLICATES.value,
        help="Find files in the target directory sharing a video id",
    )
    parser.add_argument(
        "--find-ids",
        dest="action",
        action="store_const",
        const=OperatingMode.FIND_IDS.value,
        help="Find downloaded files for the given ids",
    )
    parser.add_argument(
        "--javascript",
        dest="action",
        action="store_const",
        const=OperatingMode.JAVASCRIPT.value,
        help="Print browser console code that saves a playlist file",
    )
    parser.set_defaults(action=None)

    parser.add_argument(
        "-D",
        "--debug",
        dest="debug",
        action="store_const",
        const=DEBUG_ON,
        help="Print resolved settings and keep the temporary workspace",
    )
    parser.add_argument(
        "-T",
        "--trace",
        dest="debug",
        action="store_const",
        const=DEBUG_TRACE,
        help="Like --debug, also tracing each resolution step",
    )
    parser.add_argument("-Q", "--quiet", action="store_true", default=False, help="Ask yt-dlp to be quiet")
    parser.add_argument("-V", "--verbose", action="store_true", default=False, help="Ask yt-dlp to be verbose")
    parser.add_argument(
        "--dryrun",
        action="store_true",
        default=False,
        help="Print the yt-dlp command without running it",
    )
    parser.add_argument("-v", "--version", dest="show_version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "-h",
        "--help",
        "-?",
        "--usage",
        dest="show_help",
        action="store_true",
        help="Show this help and exit",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None, prog: Optional[str] = None) -> argparse.Namespace:
    """Parse command-line arguments, raising :class:`UsageError` on failure."""
    parser = build_parser(prog)
    return parser.parse_intermixed_args(argv)


def _normalize_env_str(value: Optional[str]) -> Optional[str]:
    """Normalize environment variable string value."""
    if not value:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _env_flag(value: Optional[str]) -> bool:
    """Any non-empty value switches a flag on."""
    return _normalize_env_str(value) is not None


def _env_debug_level(value: Optional[str]) -> Optional[str]:
    normalized = _normalize_env_str(value)
    if normalized is None:
        return None
    return DEBUG_TRACE if normalized.lower() == DEBUG_TRACE else DEBUG_ON


def _env_fragments(value: Optional[str]) -> Optional[int]:
    normalized = _normalize_env_str(value)
    if normalized is None:
        return None
    try:
        return positive_int(normalized)
    except argparse.ArgumentTypeError as exc:
        raise UsageError(f"{ENV_FRAGMENTS}: {exc}") from exc


def _pick(cli_value, environ: Mapping[str, str], name: str, default=None):
    """CLI value if given, else the environment, else *default*.

    Empty CLI strings count as unset, like empty environment values.
    """
    if isinstance(cli_value, str) and not cli_value.strip():
        cli_value = None
    if cli_value is not None:
        return cli_value
    env_value = _normalize_env_str(environ.get(name))
    if env_value is not None:
        return env_value
    return default


def resolve_config(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
    argv0: str = "kimono",
    cwd: Optional[str] = None,
    logger: Optional[ConsoleLogger] = None,
) -> ResolvedConfig:
    """Collapse CLI flags, environment variables and defaults into one record.

    Command-line values always win over the environment, which wins over the
    built-in defaults. Mode, library, target and format are derived here as
    well so callers receive a fully resolved configuration.
    """
    if environ is None:
        environ = os.environ
    logger = logger or ConsoleLogger()

    debug = args.debug if args.debug is not None else _env_debug_level(environ.get(ENV_DEBUG))
    dry_run = bool(args.dryrun) or _env_flag(environ.get(ENV_DRYRUN))
    if dry_run and not debug:
        debug = DEBUG_ON
    logger.level = debug

    invoked_name = script_name_from_argv0(argv0)
    script_override = _pick(args.script, environ, ENV_SCRIPT)
    mode = resolve_mode(invoked_name, script_override, args.action)
    if args.action:
        script_name = args.action
    elif script_override:
        script_name = mode.value
    else:
        script_name = invoked_name
    logger.trace(f"invoked as {invoked_name!r}, mode = {mode.value}")

    fragments = args.fragments
    if fragments is None:
        fragments = _env_fragments(environ.get(ENV_FRAGMENTS))

    config = ResolvedConfig(
        script_name=script_name,
        mode=mode,
        format=_pick(args.format, environ, ENV_FORMAT),
        quality=_pick(args.quality, environ, ENV_QUALITY),
        fragments=fragments if fragments is not None else DEFAULT_FRAGMENTS,
        playlist=_pick(args.playlist, environ, ENV_PLAYLIST, DEFAULT_PLAYLIST),
        target=_pick(args.target, environ, ENV_TARGET),
        order=_pick(args.order, environ, ENV_ORDER, DEFAULT_ORDER),
        subtitles=_pick(args.subtitles, environ, ENV_SUBTITLES),
        language=args.language or None,
        debug=debug,
        quiet=bool(args.quiet) or _env_flag(environ.get(ENV_QUIET)),
        verbose=bool(args.verbose) or _env_flag(environ.get(ENV_VERBOSE)),
        dry_run=dry_run,
        config=_normalize_env_str(environ.get(ENV_CONFIG)),
        ids=list(args.ids or []),
        user_home=_normalize_env_str(environ.get(ENV_HOME)) or os.path.expanduser("~"),
        cwd=cwd or os.getcwd(),
    )

    config.home = resolve_home(config.mode, environ, config.user_home)
    config.target_path = resolve_target(config.target, config.home, config.cwd)
    config.effective_format = select_format(
        config.format, config.quality, config.mode, config.language
    )
    logger.trace(f"home = {config.home}, target = {config.target_path}")
    logger.trace(f"format = {config.effective_format}")
    return config
