"""
PdfMarkup - Services Package

PDF inspection, overlay rendering and the export compositor.
"""

from pdfmarkup.services.compositor import Compositor, ExportReport
from pdfmarkup.services.pdf_info import DocumentInfo, SourcePageInfo, read_document_info

__all__ = ["Compositor", "ExportReport", "DocumentInfo", "SourcePageInfo", "read_document_info"]
