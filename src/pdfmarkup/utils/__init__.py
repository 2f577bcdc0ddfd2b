"""
PdfMarkup - Utils Package

Utility modules for the application.
"""

from pdfmarkup.utils.config_manager import (
    ConfigManager,
    EditorSettings,
    get_config_manager,
)
from pdfmarkup.utils.logger import logger

__all__ = [
    "logger",
    "ConfigManager",
    "EditorSettings",
    "get_config_manager",
]
