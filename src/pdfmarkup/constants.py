"""
PdfMarkup - Numeric Constants

Simple numeric constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Interaction Thresholds (screen pixels)
# ============================================================================

SNAP_TOLERANCE_PX: Final[float] = 8.0
MIN_SHAPE_SIZE_PX: Final[float] = 5.0
MIN_FREEHAND_POINTS: Final[int] = 2
HIT_TOLERANCE_PX: Final[float] = 5.0

# Fractions of the page extent offered as snap targets
PAGE_SNAP_FRACTIONS: Final[tuple[float, ...]] = (0.0, 0.25, 0.5, 0.75, 1.0)

# ============================================================================
# Markup Defaults (native units)
# ============================================================================

DEFAULT_STROKE_WIDTH: Final[float] = 2.0
DEFAULT_FONT_SIZE: Final[float] = 16.0
PASTE_OFFSET: Final[float] = 20.0

# ============================================================================
# Export Drawing
# ============================================================================

ARROW_HEAD_LENGTH: Final[float] = 10.0
ARROW_HEAD_ANGLE_DEG: Final[float] = 30.0
UNDERLINE_OFFSET: Final[float] = 2.0
UNDERLINE_THICKNESS_RATIO: Final[float] = 1.0 / 15.0
TEXT_BACKGROUND_PAD_X: Final[float] = 4.0
TEXT_BACKGROUND_PAD_Y: Final[float] = 2.0

DASH_PATTERN: Final[tuple[float, float]] = (5.0, 5.0)
DOT_PATTERN: Final[tuple[float, float]] = (2.0, 2.0)

# ============================================================================
# Image Signatures
# ============================================================================

PNG_SIGNATURE: Final[bytes] = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE: Final[bytes] = b"\xff\xd8\xff"

# Line advance for multi-line text, as a multiple of the font size
TEXT_LINE_HEIGHT: Final[float] = 1.2
