"""
PdfMarkup - Logger Module

This module sets up logging for the application. Service modules use
logging.getLogger(__name__), which places their records under the same
"pdfmarkup" logger tree.
"""

import logging

from pdfmarkup.config import LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL, LOGGER_NAME


def setup_logger(log_level: int | None = None, logger_name: str | None = None) -> logging.Logger:
    """Set up and configure the application logger.

    Args:
        log_level: Logging level to use (default: LOG_LEVEL)
        logger_name: Name for the logger (default: LOGGER_NAME)

    Returns:
        A configured Logger instance
    """
    if log_level is None:
        log_level = LOG_LEVEL

    # Configure basic logging settings; a no-op if the host already did
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    pkg_logger = logging.getLogger(logger_name or LOGGER_NAME)
    pkg_logger.setLevel(log_level)
    return pkg_logger


# Create a singleton logger instance
logger = setup_logger()
