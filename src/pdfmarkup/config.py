"""
PdfMarkup - Configuration Module

This module contains application-level constants and paths.
Numeric tuning values live in constants.py.
"""

import logging
import os
from typing import Final

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "PDF Markup"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = "Draw, redact and rearrange PDF pages, then bake the result"


# ============================================================================
# Configuration Directory
# ============================================================================

CONFIG_DIR: Final[str] = os.path.expanduser("~/.config/pdfmarkup")
CONFIG_FILE_PATH: Final[str] = os.path.join(CONFIG_DIR, "settings.json")


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOGGER_NAME: Final[str] = "pdfmarkup"

