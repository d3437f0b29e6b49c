# core/logging_config.py
import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "buzzvar"

# Client libraries that log every PostgREST / GoTrue request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logger(level: str = None) -> logging.Logger:
    """
    Single "buzzvar" logger for the whole app.
    Level comes from LOG_LEVEL (default INFO); unknown names fall back to INFO.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Dev reload imports this module twice
    if logger.handlers:
        return logger

    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


logger = setup_logger()
