import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logging(level: int = logging.INFO):
    """
    Configure the application logger. Safe to call more than once.
    """
    logger = logging.getLogger("vetcare")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger

def get_logger(name: str) -> logging.Logger:
    # Children of "vetcare" share its handler
    return logging.getLogger(f"vetcare.{name}")

logger = setup_logging()
