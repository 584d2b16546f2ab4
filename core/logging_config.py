# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOGGER_NAME = "land_registry"

# supabase-py logs every PostgREST/GoTrue round trip through these at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logger(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Reload-safe: uvicorn --reload imports this module more than once
    if logger.handlers:
        return logger

    logger.setLevel(level.upper())
    logger.propagate = False

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


logger = setup_logger(settings.LOG_LEVEL)
