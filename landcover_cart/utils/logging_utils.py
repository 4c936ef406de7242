"""
Logging setup for landcover_cart library.
"""

import logging
from typing import Any, Dict, Optional

LIBRARY_LOGGER = "landcover_cart"


def setup_logging(logging_config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Configure the library logger from the 'logging' config section.

    Handlers installed by an earlier call are replaced, so calling this twice
    does not duplicate output.

    Args:
        logging_config: Dict with 'level', 'format', 'file' and 'console' keys

    Returns:
        The configured library logger
    """
    logging_config = logging_config or {}
    level_name = str(logging_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    formatter = logging.Formatter(
        logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    logger = logging.getLogger(LIBRARY_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if logging_config.get("console", True):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    log_file = logging_config.get("file")
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
