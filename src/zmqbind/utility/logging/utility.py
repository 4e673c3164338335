import enum
import logging
import logging.config
import logging.handlers
import os
import sys
from typing import Optional, Tuple

from zmqbind.config import defaults


class LoggingLevel(enum.Enum):
    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    NOTSET = logging.NOTSET


LOGGING_FORMAT = "[{levelname}]{asctime}: {message}"
LOGGING_DATE_FORMAT = "%Y-%m-%d %H:%M:%S%z"


def setup_logger(
    log_paths: Tuple[str, ...] = defaults.DEFAULT_LOGGING_PATHS,
    logging_config_file: Optional[str] = None,
    logging_level: str = defaults.DEFAULT_LOGGING_LEVEL,
):
    if not log_paths and logging_config_file is None:
        return

    if logging_config_file is not None:
        print(f"use logging config file: {logging_config_file}", file=sys.stderr)
        logging.config.fileConfig(logging_config_file, disable_existing_loggers=True)
        return

    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(LoggingLevel[logging_level].value)

    formatter = logging.Formatter(LOGGING_FORMAT, datefmt=LOGGING_DATE_FORMAT, style="{")
    for path in log_paths:
        handler = _create_handler(path)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def _create_handler(path: str) -> logging.Handler:
    if path == "/dev/stdout":
        return logging.StreamHandler(sys.stdout)

    if path == "/dev/stderr":
        return logging.StreamHandler(sys.stderr)

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    return logging.handlers.TimedRotatingFileHandler(path, when="midnight", backupCount=7)
