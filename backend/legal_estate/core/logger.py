"""
Application logger
"""
import logging
import sys

from legal_estate.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Configure the root handler once and return the application logger."""
    root = logging.getLogger()
    if not any(getattr(h, "_legal_estate", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._legal_estate = True
        root.addHandler(handler)
    root.setLevel(level.upper())
    return logging.getLogger("legal_estate")


logger = setup_logging()
