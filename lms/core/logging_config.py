"""Logging setup shared by the API process and scripts.

Call ``setup_logging()`` once at startup; modules use
``logging.getLogger(__name__)``, which lands under the ``lms`` logger.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from lms.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str | None = None, log_dir: str | None = None) -> None:
    """Configure the root ``lms`` logger with console and optional file output."""
    global _configured
    if _configured:
        return

    level_name = (level or settings.log_level).upper()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger("lms")
    root.setLevel(level_name)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    directory = log_dir or settings.log_dir
    if directory:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / "lms.log", maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Uvicorn access logs duplicate the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
