import logging
from typing import Optional


def setup_logger(name: Optional[str] = None, level=logging.INFO) -> logging.Logger:
    # name=None configures the root logger so every module logger inherits it
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # console handler, added once even if the app factory runs again
    if not logger.handlers:
        ch = logging.StreamHandler()
        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
        )
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    return logger
