"""Mode dispatch and the actions that do not download anything."""

import os
import re
import sys
from collections import Counter
from typing import Iterable, List, Optional, TextIO

from .logger import ConsoleLogger
from .models import InputSource, OperatingMode, ResolvedConfig
from .paths import TemporaryWorkspace, ensure_directory
from .runner import Runner, run_downloader
from .sources import resolve_input_source
from .ytdlp_options import (
    build_download_command,
    build_list_formats_command,
    format_command,
    path_options,
)

# Downloaded files are named "<title>[<11 character id>].<ext>"
BRACKETED_ID_PATTERN = re.compile(r"\[([^\[\]/]{11})\]\.[^.]*$")

COMPANION_SCRIPT = """\
// ---- copy into browser developer tools console ----
function download(filename, text) {{
    var element = document.createElement('a');
    element.setAttribute('href', 'data:text/plain;charset=utf-8,' + encodeURIComponent(text));
    element.setAttribute('download', filename);
    element.style.display = 'none';
    document.body.appendChild(element);
    element.click();
    document.body.removeChild(element);
}}
var urls = "";
document.querySelectorAll("ytd-playlist-panel-video-renderer").forEach(function(element) {{
    urls += element.querySelector("#wc-endpoint").href.split("&")[0] + "\\n";
}});
download("{target}/{playlist}", urls);
// ---- press return to execute download function ----
"""


def _out(stream: Optional[TextIO]) -> TextIO:
    return stream if stream is not None else sys.stdout


def companion_script(target: str, playlist: str) -> str:
    """Browser console snippet that saves the open playlist's urls."""
    return COMPANION_SCRIPT.format(target=target, playlist=playlist)


def _walk_files(root: str) -> Iterable[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            yield os.path.join(dirpath, name)


def find_ids(ids: Iterable[str], home: str, cwd: str) -> List[str]:
    """Return files under *home* whose names contain any of *ids*.

    Falls back to searching *cwd* when *home* is not a directory.
    """
    root = os.path.expanduser(home)
    if not os.path.isdir(root):
        root = cwd

    matches: List[str] = []
    for video_id in ids:
        if not video_id:
            continue
        for path in _walk_files(root):
            if video_id in os.path.basename(path):
                matches.append(path)
    return matches


def extract_id(filename: str) -> Optional[str]:
    """Return the bracketed video id embedded in *filename*, if any."""
    match = BRACKETED_ID_PATTERN.search(filename)
    return match.group(1) if match else None


def find_duplicates(target: str) -> List[str]:
    """Return ids that appear in more than one file under *target*, sorted."""
    counts: Counter = Counter()
    for path in _walk_files(os.path.expanduser(target)):
        video_id = extract_id(os.path.basename(path))
        if video_id:
            counts[video_id] += 1
    return sorted(video_id for video_id, count in counts.items() if count > 1)


def log_debug_snapshot(
    config: ResolvedConfig,
    source: InputSource,
    workspace: str,
    logger: ConsoleLogger,
) -> None:
    """Emit the resolved settings as ``[debug]`` lines."""
    if not logger.debug_enabled:
        return
    output = (config.output_level or "default").upper().replace("-", "")
    logger.debug(f"script = {config.script_name}")
    logger.debug(f"format = {config.effective_format}")
    logger.debug(f"source = {source.describe()}")
    logger.debug(f"target = {config.target_path or '.'}")
    logger.debug(f"movies = {config.home}")
    logger.debug(f"output = {output}")
    logger.debug(f"config = {config.config or ''}")
    logger.debug(f"quality = {config.quality or ''}")
    logger.debug(f"playlist = {config.playlist}")
    logger.debug(f"fragments = {config.fragments}")
    logger.debug(f"order = {config.order}")
    logger.debug(f"subtitles = {config.subtitles or ''}")
    logger.debug(f"language = {config.language or ''}")
    logger.debug(f"dryrun = {'yes' if config.dry_run else 'no'}")
    bindings = path_options(config, workspace)
    for binding in bindings[1::2]:
        logger.debug(binding)


def _list_formats(config, workspace, stdin, runner, logger) -> int:
    source = resolve_input_source(
        config.ids, config.script_name, config.playlist, workspace, config.cwd,
        stdin=stdin, logger=logger,
    )
    command = build_list_formats_command(source)
    logger.trace(format_command(command))
    return runner(command)


def _download(config, workspace, stdin, runner, logger) -> int:
    source = resolve_input_source(
        config.ids, config.script_name, config.playlist, workspace, config.cwd,
        stdin=stdin, logger=logger,
    )
    log_debug_snapshot(config, source, workspace.path, logger)

    command = build_download_command(config, workspace.path, source)
    logger.debug(format_command(command))
    if config.dry_run:
        return 0

    ensure_directory(config.target_path, logger, cwd=config.cwd)
    return runner(command)


def dispatch(
    config: ResolvedConfig,
    workspace: TemporaryWorkspace,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    runner: Optional[Runner] = None,
    logger: Optional[ConsoleLogger] = None,
) -> int:
    """Run exactly one action for the resolved mode and return an exit status."""
    runner = runner or run_downloader
    logger = logger or ConsoleLogger(config.debug)
    mode = config.mode

    if mode is OperatingMode.JAVASCRIPT:
        _out(stdout).write(companion_script(config.target_path, config.playlist))
        return 0

    if mode is OperatingMode.FIND_IDS:
        for path in find_ids(config.ids, config.home, config.cwd):
            print(path, file=_out(stdout))
        return 0

    if mode is OperatingMode.DUPLICATES:
        duplicates = find_duplicates(config.target_path)
        logger.debug(f"duplicate ids = {' '.join(duplicates) or 'none'}")
        for path in find_ids(duplicates, config.home, config.cwd):
            print(path, file=_out(stdout))
        return 0

    if mode is OperatingMode.LIST_FORMATS:
        return _list_formats(config, workspace, stdin, runner, logger)

    if mode in (
        OperatingMode.YOUTUBE,
        OperatingMode.PODCAST,
        OperatingMode.AUDIO,
        OperatingMode.VIDEO,
        OperatingMode.CUSTOM,
    ):
        return _download(config, workspace, stdin, runner, logger)

    raise ValueError(f"unhandled mode: {mode}")
