"""Command-line entry point."""

import os
import sys
from dataclasses import asdict
from typing import Mapping, Optional, Sequence, TextIO

from .actions import dispatch
from .config import build_parser, parse_args, resolve_config
from .errors import UsageError
from .logger import ConsoleLogger
from .models import VERSION
from .paths import TemporaryWorkspace
from .runner import Runner, downloader_version


def _usage_error(prog: str, exc: UsageError) -> int:
    parser = build_parser(prog)
    print(f"{parser.prog}: error: {exc}", file=sys.stderr)
    print(parser.format_help(), file=sys.stderr)
    return 1


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    prog: Optional[str] = None,
    cwd: Optional[str] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    runner: Optional[Runner] = None,
) -> int:
    """Resolve the configuration and run the selected action.

    Everything the process would normally pick up implicitly (arguments,
    environment, program name, working directory, standard streams) can be
    passed in; the defaults come from the running process.
    """
    if argv is None:
        argv = sys.argv[1:]
    if environ is None:
        environ = os.environ
    if prog is None:
        prog = os.path.basename(sys.argv[0]) or "kimono"

    try:
        args = parse_args(argv, prog=prog)
    except UsageError as exc:
        return _usage_error(prog, exc)

    out = stdout if stdout is not None else sys.stdout
    if args.show_help:
        print(build_parser(prog).format_help(), file=out)
        return 0
    if args.show_version:
        print(f"Version: {VERSION} (yt-dlp {downloader_version()})", file=out)
        return 0

    logger = ConsoleLogger()
    try:
        config = resolve_config(args, environ=environ, argv0=prog, cwd=cwd, logger=logger)
    except UsageError as exc:
        return _usage_error(prog, exc)

    logger.trace(f"config = {asdict(config)}")

    with TemporaryWorkspace(config.script_name, keep=bool(config.debug), logger=logger) as workspace:
        return dispatch(
            config,
            workspace,
            stdin=stdin,
            stdout=stdout,
            runner=runner,
            logger=logger,
        )
