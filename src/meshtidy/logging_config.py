"""
Logging Configuration
Sets up the global logger for the application.
"""
import logging
import sys
from typing import Optional

from meshtidy.config import LOG_LEVEL


def setup_logging(level: int = LOG_LEVEL, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the 'meshtidy' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO). Defaults to
            config.LOG_LEVEL, i.e. MESHTIDY_LOG_LEVEL or INFO.
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger("meshtidy")
    logger.setLevel(level)

    # Avoid duplicate logs when the CLI is invoked several times in one process
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
