"""Command-line entry point.

Parses ``termpad [FILENAME]``, wires config and logging, and turns fatal
terminal errors into a clean screen, a message on stderr and exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, load_settings, read_config
from .constants import ANSI_CLEAR_SCREEN, ANSI_CURSOR_HOME
from .editor import Editor
from .logs import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termpad", description="Small terminal text editor.")
    parser.add_argument("filename", nargs="?", help="File to open. Omit to start with an empty buffer.")
    parser.add_argument("--config", type=Path, default=None, help="Path to an alternate config.json.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _fatal(stdout_fd: int, where: str, exc: OSError) -> int:
    try:
        os.write(stdout_fd, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())
    except OSError:
        pass
    reason = exc.strerror or str(exc)
    print(f"termpad: {where}: {reason}", file=sys.stderr)
    logger.error("fatal error during %s", where, exc_info=exc)
    return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config_error: ConfigError | None = None
    try:
        data = read_config(args.config)
    except ConfigError as exc:
        config_error = exc
        data = {}
    settings = load_settings(data)
    setup_logging(settings.log_level, settings.log_file)
    logger.info("termpad %s starting", __version__)
    if config_error is not None:
        logger.warning("ignoring unreadable config %s", config_error)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        print("termpad: stdin/stdout must be a tty", file=sys.stderr)
        return 1

    editor = Editor(stdin_fd, stdout_fd, settings)
    if args.filename:
        try:
            editor.open_file(args.filename)
        except OSError as exc:
            return _fatal(stdout_fd, f"opening {args.filename}", exc)

    try:
        editor.run()
    except OSError as exc:
        return _fatal(stdout_fd, "terminal", exc)
    except SystemExit as exc:
        if isinstance(exc.code, int):
            return exc.code
        return 0
    return 0
