"""telemark - entity-annotated message text and ordered display indexes.

Turns protocol message entities into decorated text with style and action
channels, answers region queries over it, and keeps chat/message lists in
sentinel-bounded display indexes bound to a rendering surface.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from telemark.config import LogConfig

__version__ = "0.1.0"

_FILE_HANDLER = "telemark.file"
_CONSOLE_HANDLER = "telemark.console"


def setup_logging(config: LogConfig) -> None:
    """Configure logging to both console and rotating file.

    Safe to call more than once: later calls leave the root logger's
    existing telemark handlers in place.
    """
    root_logger = logging.getLogger()
    if any(h.get_name() == _FILE_HANDLER for h in root_logger.handlers):
        return

    log_dir = config.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"telemark.{os.getpid()}.log"

    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.set_name(_FILE_HANDLER)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setLevel(config.console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
