"""Logging configuration for the swrcache command line.

The library never calls this; applications embedding swrcache configure
logging themselves. The CLI routes all records through handlers built
here: stdout always, plus a size-rotated file when a log file is set.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3

# Marks handlers installed here so a second call replaces only those
_HANDLER_TAG = "_swrcache_cli"


def _file_handler(log_file: Path) -> Optional[logging.Handler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding='utf-8'
        )
    except OSError as e:
        logging.getLogger(__name__).error(f"Failed to set up file logging to {log_file}: {e}")
        return None


def build_handlers(log_level: int, log_file: Optional[Union[str, Path]] = None) -> List[logging.Handler]:
    """Creates the CLI handlers, all sharing one formatter and level."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        file_handler = _file_handler(Path(log_file))
        if file_handler is not None:
            handlers.append(file_handler)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
    return handlers


def setup_logging(log_level: int = logging.WARNING, log_file: Optional[Union[str, Path]] = None) -> None:
    """Points the root logger at the CLI handlers.

    Handlers from an earlier call are closed and replaced; handlers
    installed by anything else are left alone.

    Args:
        log_level: Minimum level, e.g. logging.DEBUG for ``--verbose``.
        log_file: Optional file that receives the same records as stdout.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in build_handlers(log_level, log_file):
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured. level={logging.getLevelName(log_level)}, file={log_file or 'none'}"
    )
