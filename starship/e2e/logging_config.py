"""
Logging configuration for the e2e harness.
"""

import logging
import os
import traceback
from pathlib import Path

LOGGER_NAME = "starship_e2e"
LOGS_PATH_ENV_KEY = "E2E_LOGS_PATH"


class DetailedExceptionFormatter(logging.Formatter):
    """Formatter that includes full tracebacks for ERROR and above."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR:
            if record.exc_info:
                record.exc_text = "".join(traceback.format_exception(*record.exc_info)).rstrip()
            return super().format(record)
        return self.formatMessage(self._with_message(record))

    def _with_message(self, record: logging.LogRecord) -> logging.LogRecord:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record, self.datefmt)
        return record


def setup_logger() -> logging.Logger:
    """
    Set up and configure the e2e harness logger.

    A file handler is added only when E2E_LOGS_PATH is set, so plain test runs
    leave nothing behind on disk.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    formatter = DetailedExceptionFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logs_path = os.environ.get(LOGS_PATH_ENV_KEY)
    if logs_path:
        Path(logs_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logs_path, mode="a")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
