"""File logging for the editor.

The terminal belongs to the editor while it runs, so records only ever go to
a rotating log file, never to stdout or stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

LOG_FILENAME = "termpad.log"
DEFAULT_LOG_PATH = Path(user_log_dir("termpad", appauthor=False)) / LOG_FILENAME

_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-18s - %(message)s"


def setup_logging(level: str = "WARNING", log_file: str | Path | None = None) -> logging.Logger:
    root = logging.getLogger("termpad")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    if level.upper() == "OFF":
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.CRITICAL + 1)
        return root

    path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError:
        # Unwritable log location: run without a log rather than refuse to start.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return root
