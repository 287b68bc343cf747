"""
Root logger setup for the application.

Services only ever call ``logging.getLogger(__name__)``; handlers are
installed once, here, by ``create_app``.  Output always goes to the
console and, when ``settings.log_file`` is set, to that file as well.
"""

import logging
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Install console (and optional file) handlers on the root logger.

    Does nothing when the root logger already has handlers, e.g. under
    pytest or when ``create_app`` runs more than once.  Unknown level
    names fall back to ``INFO``.
    """
    if logging.getLogger().handlers:
        return

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )
