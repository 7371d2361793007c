"""Logging setup for fluentdb tools and host applications.

The library itself only logs through module loggers. ``setup_logging`` is
for entry points: it adds a console handler when nobody has configured the
root logger yet, and always makes sure the transaction logger has its own
rotating file so swallowed commit/rollback/close failures are kept on disk.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

FILE_LOGGERS = ["fluentdb.transactions"]

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)


def attach_console(level=logging.INFO) -> bool:
    """Add a console handler to the root logger unless it already has handlers."""
    root = logging.getLogger()
    if root.handlers:
        return False
    root.setLevel(level)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(_formatter())
    root.addHandler(console)
    return True


def attach_log_file(name: str, level=logging.INFO, log_dir: str = "logs") -> RotatingFileHandler:
    """Give logger ``name`` a rotating file in ``log_dir``, reusing one already attached."""
    log_file = os.path.abspath(os.path.join(log_dir, f"{name.replace('.', '_')}.log"))
    target = logging.getLogger(name)
    for handler in target.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == log_file:
            return handler

    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    handler.setLevel(level)
    handler.setFormatter(_formatter())
    target.addHandler(handler)
    if target.level == logging.NOTSET:
        # host may have raised the root level above ours
        target.setLevel(level)
    return handler


def setup_logging(level=logging.INFO, log_dir="logs"):
    """Console logging (if the root logger is bare) plus a file per FILE_LOGGERS entry.

    Safe to call repeatedly.
    """
    attach_console(level)
    for name in FILE_LOGGERS:
        attach_log_file(name, level=level, log_dir=log_dir)
