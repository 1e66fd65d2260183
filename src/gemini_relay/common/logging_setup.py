"""Central logging setup for the relay."""
from __future__ import annotations
import logging
import sys

def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure root logger with a stdout handler.

    Args:
        level: Logging level.
    """
    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
