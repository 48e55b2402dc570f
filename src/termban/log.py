"""Logging setup.

The TUI owns the terminal, so records never go to stderr while it runs:
they go to a log file when one is configured, and to the Textual devtools
console otherwise.
"""

import logging

from textual.logging import TextualHandler

from termban.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    """Install the root handler for the process."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.WARNING

    if settings.log_file is not None:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    else:
        handler = TextualHandler()

    logging.basicConfig(format=LOG_FORMAT, level=level, handlers=[handler], force=True)
