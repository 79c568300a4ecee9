# azure_unused_storage_tool/logger_config.py
"""Configures the application-wide logger."""

import logging
import sys

# Store the handler globally to prevent adding it multiple times
_console_handler = None
_formatter = None

# Azure SDK loggers that are too chatty at INFO
_NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
)


def setup_logger(name=__name__, level=logging.INFO):
    """Sets up and returns a configured logger instance.

    `level` may be a logging constant or a level name such as "DEBUG".
    """
    global _console_handler, _formatter
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Only add the handler if the logger doesn't have one already
    if not logger.handlers:
        if _console_handler is None:
            _console_handler = logging.StreamHandler(sys.stdout)
            _formatter = logging.Formatter(
                '%(asctime)s [%(name)s] [%(levelname)s] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            _console_handler.setFormatter(_formatter)

        logger.addHandler(_console_handler)
        logger.propagate = True

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return logger
