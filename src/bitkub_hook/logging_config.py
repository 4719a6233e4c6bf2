import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    if any(getattr(handler, "_bitkub_hook", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._bitkub_hook = True
    root.addHandler(handler)


__all__ = ["configure_logging"]
