"""Logging configuration for Tallybook.

All application loggers live under the "tallybook" namespace, so one call to
setup_logging routes ingestion, category and CLI messages to the same daily
log file and the console.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

ROOT_LOGGER_NAME = "tallybook"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and (optionally) console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also echo messages to stderr.

    Returns:
        Configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.log_level)
    logger.propagate = False

    # Calling setup twice must not duplicate output
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"tallybook-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger or one of its children.

    Args:
        name: Optional dotted module name; "ingestion.engine" becomes
            "tallybook.ingestion.engine".

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
