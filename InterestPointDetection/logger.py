"""
Logging for InterestPointDetection

Every module logs through a child of the "InterestPointDetection" logger.
Library code only calls get_logger(); applications opt into output with
configure_root_logger(). Timer reports how long each detection stage took.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "InterestPointDetection"

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    force: bool = False
) -> logging.Logger:
    """
    Attach console and/or file handlers to a logger

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file; parent directories are created
        console: Whether to write to stdout
        force: Replace existing handlers instead of keeping them

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    if logger.handlers and not force:
        return logger

    logger.setLevel(getattr(logging, level.upper()))
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one module of the package, e.g. get_logger("detector")"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_root_logger(level: str = "INFO", log_file: Optional[str] = None):
    """
    Send the package's log output to stdout and optionally a file

    Args:
        level: Logging level; DEBUG shows per-stage counts and timings
        log_file: Optional path to log file
    """
    setup_logger(name=ROOT_LOGGER_NAME, level=level, log_file=log_file,
                 console=True, force=True)


def set_level(level: str):
    """Change the package logging level (DEBUG, INFO, WARNING, ERROR)"""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(getattr(logging, level.upper()))


class Timer:
    """
    Context manager that logs the elapsed wall time of a block.

        with Timer("Finding extrema", logger):
            points = find_peaks(interest, PeakType.MAX)
    """

    def __init__(self, label: str, logger: Optional[logging.Logger] = None,
                 level: int = logging.DEBUG):
        self.label = label
        self.logger = logger or get_logger("timer")
        self.level = level
        self.start_time = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> 'Timer':
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.log(self.level, "%s: %.4fs", self.label, self.elapsed)
        return False
