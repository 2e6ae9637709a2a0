"""
Logging setup
"""

import logging
import os
from pathlib import Path

LOGGER_NAME = "hexfield"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level):
    """Level name or number -> number; ValueError for anything else."""
    if isinstance(level, bool):
        raise ValueError(f"Unknown log level: {level}")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.strip().upper())
        if isinstance(numeric_level, int):
            return numeric_level
    raise ValueError(f"Unknown log level: {level}")


def setup_logging(level="INFO", log_dir="logs", log_file=None):
    """
    Configure the "hexfield" logger: console handler, plus a file handler when
    log_file is given. Calling it again replaces the handlers it added before.
    """
    numeric_level = resolve_level(level)

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_hexfield_handler", False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level)
    console_handler._hexfield_handler = True
    logger.addHandler(console_handler)

    if log_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(log_dir, log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(numeric_level)
        file_handler._hexfield_handler = True
        logger.addHandler(file_handler)

    return logger
