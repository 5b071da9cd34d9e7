import logging
import os
from logging.handlers import RotatingFileHandler

from app.platform.config import settings

LOG_FILE_NAME = "page_insight.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_file_path() -> str:
    log_dir = os.path.join(os.getcwd(), settings.LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, LOG_FILE_NAME)


def get_logger(name: str):
    """
    Creates a logger instance that writes to console AND a rotating file.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(_log_file_path(), maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
