"""
PdfMarkup - Python package for marking up PDF documents

This package provides an annotation editing engine (markup model, editing
sessions, undo history, page sequencing) and an export pass that bakes
markup and page transforms into a new PDF.
"""

__version__ = "1.0.0"
__author__ = "PdfMarkup Team"
__license__ = "GPL-3.0"


def main() -> int:
    """Run the command line interface."""
    from pdfmarkup.cli import main as cli_main

    return cli_main()
