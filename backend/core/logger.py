import logging
import sys

from core.config import settings


def setup_logger(name: str = None, log_level: str = None) -> logging.Logger:
    """
    Sets up a logger with console (StreamHandler) output.
    Safe to call more than once; handlers are only attached the first time.
    """
    logger = logging.getLogger(name)
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(level)

    # Prevent adding handlers multiple times if logger is already set up
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)

    return logger
