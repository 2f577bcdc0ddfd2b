#!/usr/bin/env python3
"""
PdfMarkup CLI — inspect PDFs and bake markup from the terminal.

Usage:
    python -m pdfmarkup <command> [options]

Commands:
    info        Show page count and per-page size/rotation
    export      Apply markup and page changes, write a new PDF

Examples:
    pdfmarkup info document.pdf

    # Stamp markup saved as JSON
    pdfmarkup export input.pdf -o out.pdf --markup notes.json

    # Rotate page 1, drop page 2, put page 3 first
    pdfmarkup export input.pdf -o out.pdf --rotate 1:90 --delete 2 --order 3,1

Page numbers given to --rotate, --delete and --order, and the "page" field
of markup objects, always refer to the input document's page order.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pdfmarkup.config import APP_DESCRIPTION, APP_NAME, APP_VERSION, LOG_DATE_FORMAT, LOG_FORMAT
from pdfmarkup.editor.document import EditorDocument
from pdfmarkup.editor.markup_model import markup_from_dict
from pdfmarkup.editor.page_operations import delete_page, reorder_pages, set_page_rotation
from pdfmarkup.services.pdf_info import read_document_info
from pdfmarkup.utils.config_manager import ConfigManager, EditorSettings, get_config_manager
from pdfmarkup.utils.exceptions import InvalidInputError, PdfMarkupError

# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _parse_page_list(text: str) -> list[int]:
    """Parse "1,3,7" into a list of page numbers, keeping the given order.

    Args:
        text: Comma separated page numbers.

    Returns:
        List of 1-indexed page numbers.
    """
    pages: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            pages.append(int(part))
        except ValueError:
            raise ValueError(f"Invalid page number '{part}'. Use numbers like '1,3,7'.") from None
    return pages


def _parse_rotations(text: str) -> dict[int, int]:
    """Parse "1:90,3:180" into {page: degrees}."""
    rotations: dict[int, int] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            page_s, angle_s = part.split(":", 1)
            rotations[int(page_s)] = int(angle_s)
        except ValueError:
            raise ValueError(f"Invalid rotation '{part}'. Use PAGE:DEGREES like '1:90'.") from None
    return rotations


def _load_markup_file(path: Path) -> list[dict]:
    """Read markup dictionaries from a JSON list or {"markup": [...]}."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("markup", [])
    if not isinstance(data, list):
        raise InvalidInputError("markup file must contain a list of objects", field_name="markup")
    return data


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog="pdfmarkup",
        description=APP_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging (DEBUG)")
    p.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    p.add_argument("--config", type=Path, default=None, help="Settings file (JSON)")

    sub = p.add_subparsers(dest="command", help="Available commands")

    # --- info ---
    info_p = sub.add_parser("info", help="Show page count and page sizes")
    info_p.add_argument("input", type=Path, help="Input PDF file")

    # --- export ---
    export_p = sub.add_parser("export", help="Bake markup and page changes into a new PDF")
    export_p.add_argument("input", type=Path, help="Input PDF file")
    export_p.add_argument("-o", "--output", type=Path, required=True, help="Output PDF file")
    export_p.add_argument("--markup", type=Path, default=None, help="Markup JSON file")
    export_p.add_argument(
        "--order",
        type=str,
        default=None,
        metavar="ORDER",
        help="New page order by input page number (e.g. '3,1,2')",
    )
    export_p.add_argument(
        "--rotate",
        type=str,
        default=None,
        metavar="PAGE:DEG",
        help="Extra clockwise rotation per page (e.g. '1:90,3:180')",
    )
    export_p.add_argument(
        "--delete",
        type=str,
        default=None,
        metavar="PAGES",
        help="Pages to remove (e.g. '2,4')",
    )

    return p


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_info(args, _logger) -> int:
    """Handle the 'info' command."""
    info = read_document_info(args.input.read_bytes())
    print(f"File:       {args.input}")
    print(f"Pages:      {info.page_count}")
    print(f"Size:       {info.file_size_mb:.2f} MB ({info.file_size_bytes:,} bytes)")
    print(f"Version:    PDF {info.pdf_version}")
    print(f"Encrypted:  {'Yes' if info.encrypted else 'No'}")
    if info.title:
        print(f"Title:      {info.title}")
    for i, page in enumerate(info.pages, 1):
        print(f"  Page {i}: {page.width:.1f} x {page.height:.1f} pt, rotation {page.rotation}°")
    return 0


def _load_settings(args) -> EditorSettings:
    manager = ConfigManager(str(args.config)) if args.config else get_config_manager()
    return EditorSettings.from_config(manager)


def _cmd_export(args, logger) -> int:
    """Handle the 'export' command."""
    document = EditorDocument.from_bytes(args.input.read_bytes(), settings=_load_settings(args))

    if args.markup:
        for item in _load_markup_file(args.markup):
            document.store.add(markup_from_dict(item))
        logger.info(f"Loaded {len(document.store)} markup object(s) from {args.markup}")

    for page_number, degrees in _parse_rotations(args.rotate or "").items():
        set_page_rotation(document, f"page-{page_number - 1}", degrees)

    for page_number in _parse_page_list(args.delete or ""):
        delete_page(document, f"page-{page_number - 1}")

    if args.order:
        positions = []
        for page_number in _parse_page_list(args.order):
            position = document.pages.position_of(f"page-{page_number - 1}")
            if position is None:
                raise InvalidInputError(f"page {page_number} is not in the document", field_name="order")
            positions.append(position)
        reorder_pages(document, positions)

    data = document.export()
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(data)

    report = document.compositor.last_report
    print(f"Exported {document.pages.page_count} page(s) → {args.output}")
    if report and report.skipped:
        print(f"Skipped {len(report.skipped)} object(s): {', '.join(report.skipped)}", file=sys.stderr)
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("pdfmarkup").setLevel(level)
    logger = logging.getLogger("pdfmarkup.cli")

    if not args.input.exists():
        print(f"Error: {args.input} not found", file=sys.stderr)
        return 1

    handlers = {
        "info": _cmd_info,
        "export": _cmd_export,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args, logger)
    except (PdfMarkupError, ValueError, OSError, json.JSONDecodeError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
