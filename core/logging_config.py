import sys

from loguru import logger

from core.config import LOG_LEVEL

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def setup_logging(level: str = LOG_LEVEL):
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    return logger
