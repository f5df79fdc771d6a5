"""yt-dlp command-line assembly."""

import shlex
from typing import List, Optional, Sequence

from .models import (
    COOKIES_BROWSER,
    DEFAULT_ORDER,
    DEFAULT_SUBTITLES,
    DOWNLOADER,
    InputSource,
    OperatingMode,
    ResolvedConfig,
)


def format_command(command: Sequence[str]) -> str:
    """Render a token list as a single shell-quoted string."""
    return shlex.join(command)


def split_config(config: Optional[str]) -> List[str]:
    """Split the ``CONFIG`` passthrough string using shell rules."""
    if not config:
        return []
    return shlex.split(config)


def authentication_options() -> List[str]:
    return ["--cookies-from-browser", COOKIES_BROWSER]


def path_options(config: ResolvedConfig, workspace: str) -> List[str]:
    """The three ``--paths`` bindings: workspace, library and target."""
    return [
        "--paths", f"temp:{workspace}",
        "--paths", f"home:{config.home}",
        "--paths", config.target_path,
    ]


def content_options(config: ResolvedConfig) -> List[str]:
    """Options that depend on whether we want audio or video."""
    if config.mode is OperatingMode.AUDIO:
        return ["--audio-format", "mp3", "--extract-audio"]

    options = [
        "--embed-metadata",
        "--embed-thumbnail",
        "--embed-chapters",
        "--merge-output-format", "mp4",
    ]
    if config.subtitles or config.mode is OperatingMode.YOUTUBE:
        options += [
            "--embed-subs",
            "--write-automatic-subs",
            "--sub-langs", config.subtitles or DEFAULT_SUBTITLES,
        ]
    return options


def order_options(config: ResolvedConfig) -> List[str]:
    if (config.order or DEFAULT_ORDER) == "random":
        return ["--playlist-random"]
    return []


def build_list_formats_command(source: InputSource) -> List[str]:
    """Command that lists the formats available for *source*."""
    return [
        DOWNLOADER,
        "--quiet",
        *authentication_options(),
        "--list-formats",
        *source.to_args(),
    ]


def build_download_command(
    config: ResolvedConfig, workspace: str, source: InputSource
) -> List[str]:
    """Assemble the full yt-dlp download command as a list of tokens."""
    command = [DOWNLOADER, *authentication_options(), "--mark-watched"]
    command += ["--concurrent-fragments", str(config.fragments)]
    command.append("--progress")
    level = config.output_level
    if level:
        command.append(level)
    command.append("--restrict-filenames")
    command += path_options(config, workspace)
    command.append("--no-warnings")
    command += ["--format", config.effective_format]
    command += ["--xattrs", "--xattr-set-filesize"]
    command += content_options(config)
    command += order_options(config)
    command += split_config(config.config)
    command += source.to_args()
    return command
