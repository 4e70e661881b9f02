"""
log_util.py: Shared logger factory for the exporter.

Usage:
    logger = app_logger(__name__)
    backup_logger = app_logger("derive_history", log_file="derive_history.log")
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def app_logger(
    name: str, log_file: Optional[str] = None, level: int = logging.INFO
) -> logging.Logger:
    """
    Return a logger with a console handler and, optionally, a file handler.

    Handlers are attached once per logger name, so repeated calls from
    re-imported modules do not duplicate output.

    :param name: Logger name, usually the module's __name__.
    :param log_file: Optional path of a file that also receives the records.
    :param level: Logging level for the logger and its handlers.
    :return: Configured logging.Logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(
        type(h) is logging.StreamHandler for h in logger.handlers
    ):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console.setLevel(level)
        logger.addHandler(console)

    if log_file and not any(
        isinstance(h, logging.FileHandler) and h.baseFilename.endswith(log_file)
        for h in logger.handlers
    ):
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    # Records are handled here; don't duplicate through the root logger.
    logger.propagate = False
    return logger
