"""
Logging setup for the API process.
"""

import logging

from app.core.config import Settings

NOISY_LIBRARY_LOGGERS = ("pymongo", "motor", "httpx", "uvicorn.access")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once: existing handlers are replaced, not stacked.
    """
    level = logging.DEBUG if settings.debug else _resolve_level(settings.log_level)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    for logger_name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger
