"""
PdfMarkup - Font Helpers

Maps a free-form font family name onto one of the PDF standard 14 fonts
and measures text with reportlab's metrics.
"""

from reportlab.pdfbase import pdfmetrics

# (regular, bold, italic, bold-italic) per standard family
_STANDARD_FAMILIES: dict[str, tuple[str, str, str, str]] = {
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "Helvetica": (
        "Helvetica",
        "Helvetica-Bold",
        "Helvetica-Oblique",
        "Helvetica-BoldOblique",
    ),
}


def resolve_font_name(family: str, bold: bool = False, italic: bool = False) -> str:
    """Pick a standard font for a family name and weight/style flags.

    Families containing "Times" map to Times, those containing "Courier"
    map to Courier, and everything else falls back to Helvetica.
    """
    if "Times" in family:
        variants = _STANDARD_FAMILIES["Times"]
    elif "Courier" in family:
        variants = _STANDARD_FAMILIES["Courier"]
    else:
        variants = _STANDARD_FAMILIES["Helvetica"]

    return variants[(1 if bold else 0) + (2 if italic else 0)]


def text_width(text: str, font_name: str, font_size: float) -> float:
    """Width of a single line of text in points."""
    return pdfmetrics.stringWidth(text, font_name, font_size)
