"""
PdfMarkup - Color Helpers

Resolves CSS-style color strings stored on markup objects into
reportlab colors for the export pass.
"""

from reportlab.lib import colors

from pdfmarkup.utils.logger import logger

TRANSPARENT_VALUES = frozenset({"", "transparent", "none"})


def is_transparent(value: str | None) -> bool:
    """Return True if the color string means 'paint nothing'."""
    return value is None or value.strip().lower() in TRANSPARENT_VALUES


def is_white(value: str | None) -> bool:
    """Return True for the spellings of white used by redaction patches."""
    if value is None:
        return False
    return value.strip().lower() in ("white", "#fff", "#ffffff")


def resolve_color(value: str | None) -> colors.Color | None:
    """Convert a color string to a reportlab Color.

    Args:
        value: Named color, '#rrggbb', '#rgb' or 'transparent'

    Returns:
        reportlab Color, or None for transparent values
    """
    if is_transparent(value):
        return None

    text = value.strip()
    # reportlab does not expand 3-digit hex
    if text.startswith("#") and len(text) == 4:
        text = "#" + "".join(ch * 2 for ch in text[1:])

    try:
        return colors.toColor(text)
    except ValueError:
        logger.warning(f"Unknown color {value!r}, using black")
        return colors.black
