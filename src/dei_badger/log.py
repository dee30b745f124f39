"""Logging configuration with Rich formatting.

setup_logging() installs the Rich handler once per process; get_logger() returns module loggers.
"""

import logging
from typing import Optional
from rich.logging import RichHandler
from .config import get_settings

def setup_logging(level: Optional[str] = None):
    level = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )

    # Adapters log each failed provider call themselves
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

def get_logger(name: str):
    return logging.getLogger(f"dei_badger.{name}")
