# market_db/logging_config.py
"""
One-time logger setup for services and test runs
"""
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .constants import LOG_DIR, LOG_FILE_PREFIX, TEST_LOG_DIR

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_init_lock = threading.Lock()
_log_file: Optional[Path] = None


def init_logger(
    log_dir: Optional[Union[str, Path]] = None,
    level: Union[int, str] = logging.DEBUG,
    testing: bool = False,
) -> Path:
    """
    Attach a file handler to the ``market_db`` logger.

    Only the first call configures anything. Later calls return the log file
    chosen by the first one.
    """
    global _log_file

    with _init_lock:
        if _log_file is not None:
            return _log_file

        directory = Path(log_dir or (TEST_LOG_DIR if testing else LOG_DIR))
        os.makedirs(directory, exist_ok=True)

        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        prefix = f"{LOG_FILE_PREFIX}_test" if testing else LOG_FILE_PREFIX
        path = directory / f"{prefix}_{stamp}.log"

        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        package_logger = logging.getLogger("market_db")
        package_logger.setLevel(level)
        package_logger.addHandler(handler)
        # keep pool chatter out of debug logs
        logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)

        _log_file = path
        logger.info(f"Logger initialized, writing to {path}")
        return path
