"""Console logging for the service, configured once at startup."""

import logging
import sys
from typing import Optional

from config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("student_admin")
    logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    # Clear existing handlers so reloads do not duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
