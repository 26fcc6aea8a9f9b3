import logging, sys
import os
from . import config


def get_logger(name: str = "madegg"):
    """Logger writing to stdout and to the configured log file; level from config."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        fmt = logging.Formatter('%(asctime)s %(levelname)s %(name)s - %(message)s')
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        if config.LOG_FILE:
            try:
                os.makedirs(os.path.dirname(os.path.abspath(config.LOG_FILE)), exist_ok=True)
                fh = logging.FileHandler(config.LOG_FILE, encoding='utf-8')
                fh.setFormatter(fmt)
                logger.addHandler(fh)
            except OSError as e:
                logger.warning("Log file %s unavailable, logging to stdout only: %s", config.LOG_FILE, e)
        logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    return logger
