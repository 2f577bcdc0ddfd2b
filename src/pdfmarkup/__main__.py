#!/usr/bin/env python3
"""
PdfMarkup - Entry point for python -m pdfmarkup

This module allows the package to be run as a module:
    python -m pdfmarkup
"""

import sys

from pdfmarkup import main

if __name__ == "__main__":
    sys.exit(main())
