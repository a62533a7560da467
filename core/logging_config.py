# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "complaints"


def setup_logger(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """
    One named logger for the whole service. Modules import `logger`
    from here instead of calling logging.getLogger themselves.
    """
    complaints_logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers in dev reload
    if complaints_logger.handlers:
        return complaints_logger

    complaints_logger.setLevel(logging.getLevelName(level.upper()))

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    complaints_logger.addHandler(stream_handler)

    # uvicorn configures the root logger too; don't print every line twice
    complaints_logger.propagate = False

    return complaints_logger


logger = setup_logger()
