"""termpad: a small raw-mode terminal text editor."""

import logging

from .constants import TERMPAD_VERSION as __version__

# Records emitted before setup_logging() must not reach the raw terminal.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["__version__"]
