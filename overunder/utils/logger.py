"""Logging setup based on loguru"""
import sys
from loguru import logger


# Drop loguru's default stderr handler; setup_logger installs ours
logger.remove()

_initialized = False


def setup_logger(
    log_file: str = "logs/overunder.log",
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "30 days",
) -> None:
    """Configure console and file sinks

    Args:
        log_file: Log file path
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        rotation: Size at which the file rotates
        retention: How long rotated files are kept
    """
    global _initialized

    if _initialized:
        logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    logger.add(
        log_file,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
    )

    _initialized = True


def get_logger(name: str):
    """Return a logger bound to a module name

    Args:
        name: Module name

    Returns:
        loguru logger with ``name`` in its extra context
    """
    return logger.bind(name=name)
