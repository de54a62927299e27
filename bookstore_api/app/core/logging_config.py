"""
Logging setup for the bookstore API.

Records go to stderr and, when ``LOG_FILE`` is set, to that file as
well, all through one formatter.  The MongoDB driver is chatty below
WARNING (heartbeats, every command), so it is only let through when
the application itself runs at DEBUG.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers held at WARNING unless the app runs at DEBUG.
NOISY_LOGGERS = ("pymongo",)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach handlers to the root logger once per process.

    ``create_app`` calls this on every invocation, and the tests build
    an app per test, so a root logger that already has handlers is
    left alone.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=DATE_FORMAT, handlers=handlers)

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
