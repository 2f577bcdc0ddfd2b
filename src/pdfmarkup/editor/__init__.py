"""
PdfMarkup - Editor Package

Markup model, edit history, page sequence and the interactive editing
session. EditorDocument and EditingSession live in their own modules
(pdfmarkup.editor.document, pdfmarkup.editor.session) because they pull
in the export services.
"""

from pdfmarkup.editor.history import HistoryLog
from pdfmarkup.editor.markup_model import (
    REDACTION_STYLE,
    ArrowMarkup,
    EllipseMarkup,
    FreehandMarkup,
    ImageMarkup,
    LineMarkup,
    MarkupObject,
    RectangleMarkup,
    ShapeStyle,
    StrokeStyle,
    TextMarkup,
    Tool,
    markup_from_dict,
)
from pdfmarkup.editor.markup_store import MarkupStore
from pdfmarkup.editor.page_model import PageSequence, PageTransform

__all__ = [
    "HistoryLog",
    "MarkupStore",
    "PageSequence",
    "PageTransform",
    "REDACTION_STYLE",
    "ArrowMarkup",
    "EllipseMarkup",
    "FreehandMarkup",
    "ImageMarkup",
    "LineMarkup",
    "MarkupObject",
    "RectangleMarkup",
    "ShapeStyle",
    "StrokeStyle",
    "TextMarkup",
    "Tool",
    "markup_from_dict",
]
