"""Entry point for termban."""

import logging
import sys

from termban.config import Settings
from termban.errors import PersistenceError
from termban.log import configure_logging
from termban.model.writer import ensure_writable

logger = logging.getLogger(__name__)


def error(message: str) -> None:
    """Print error to stderr and exit 1."""
    print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def main():
    settings = Settings.from_env()
    try:
        configure_logging(settings)
    except OSError as e:
        error(f"cannot open log file {settings.log_file}: {e.strerror or e}")

    try:
        ensure_writable(settings.save_path)
    except PersistenceError as e:
        error(str(e))

    from termban.session import Session
    from termban.ui import TermbanApp

    session = Session.open(settings)
    app = TermbanApp(session)
    app.run()
    logger.debug("exited with code %s", app.return_code)
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
