from __future__ import annotations

import logging
import sys

"""Console logging for the importer.

Every line is `LABEL message`, with LABEL one of DEBUG, INFO, WARN, ERROR or
SUMMARY. Modules log through logging.getLogger(__name__); those loggers sit
under the "user_import" logger, which owns the single stdout handler.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "enable_debug",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "user_import"
SUMMARY_LEVEL = 25  # between INFO and WARNING

_CONSOLE_HANDLER = "user_import.console"

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}


class LabeledFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if handler.get_name() == _CONSOLE_HANDLER:
            return handler
    return None


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach the stdout handler to the application logger once.

    Calling it again returns the same logger and leaves its level alone.
    """
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(APP_LOGGER_NAME)
    if _console_handler(logger) is not None:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_CONSOLE_HANDLER)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    return setup_logging()


def enable_debug() -> None:
    logger = setup_logging()
    logger.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")


def log_summary(message: str) -> None:
    """Log `message` with the SUMMARY label."""
    setup_logging().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Detach the stdout handler so the next setup binds the current sys.stdout (tests)."""
    logger = logging.getLogger(APP_LOGGER_NAME)
    handler = _console_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
