"""
PdfMarkup - Page Overlay Merge

Stamps the content of an overlay page (drawn with reportlab) on top of a
page in another PDF. The original content is isolated in its own q/Q
group, overlay resources are copied in under a prefixed name, and the
overlay content stream is rewritten to use those names.
"""

import logging
from typing import Any

import pikepdf

logger = logging.getLogger(__name__)

# Resource categories an overlay page may reference by name
RESOURCE_CATEGORIES = (
    "/Font",
    "/XObject",
    "/ExtGState",
    "/ColorSpace",
    "/Pattern",
    "/Shading",
    "/Properties",
)


def extract_content_streams(
    contents: Any,
    target_pdf: pikepdf.Pdf,
    copy_foreign: bool = True,
) -> list:
    """Extract content streams from a page /Contents entry."""
    if contents is None:
        return []
    items = list(contents) if isinstance(contents, pikepdf.Array) else [contents]
    if copy_foreign:
        return [target_pdf.copy_foreign(stream) for stream in items]
    return items


def _resource_renames(overlay_resources: pikepdf.Dictionary, prefix: str) -> dict[str, str]:
    renames: dict[str, str] = {}
    for category in RESOURCE_CATEGORIES:
        if category not in overlay_resources:
            continue
        for name in overlay_resources[category].keys():
            renames[str(name)] = f"/{prefix}{str(name)[1:]}"
    return renames


def _existing_resource_names(page: pikepdf.Page) -> set[str]:
    resources = page.obj.get("/Resources")
    if resources is None:
        return set()
    names: set[str] = set()
    for category in RESOURCE_CATEGORIES:
        if category in resources:
            names.update(str(name) for name in resources[category].keys())
    return names


def unique_prefix(target_page: pikepdf.Page, overlay_resources: pikepdf.Dictionary, base: str) -> str:
    """Pick a prefix whose renamed resources do not clash with the target page."""
    existing = _existing_resource_names(target_page)
    prefix = base
    counter = 0
    while existing.intersection(_resource_renames(overlay_resources, prefix).values()):
        counter += 1
        prefix = f"{base}_{counter}"
    return prefix


def _rename_operand(operand: Any, renames: dict[str, str]) -> Any:
    if isinstance(operand, pikepdf.Name) and str(operand) in renames:
        return pikepdf.Name(renames[str(operand)])
    return operand


def rewrite_overlay_content(overlay_page: pikepdf.Page, renames: dict[str, str]) -> list:
    """Parse an overlay page and rename resource references in its operators."""
    rewritten: list = []
    for instruction in pikepdf.parse_content_stream(overlay_page):
        if isinstance(instruction, pikepdf.ContentStreamInlineImage):
            rewritten.append(instruction)
            continue
        operands, operator = instruction
        rewritten.append(([_rename_operand(op, renames) for op in operands], operator))
    return rewritten


def merge_page_resources(
    target_page: pikepdf.Page,
    overlay_pdf: pikepdf.Pdf,
    overlay_resources: pikepdf.Dictionary,
    target_pdf: pikepdf.Pdf,
    renames: dict[str, str],
) -> int:
    """Copy every overlay resource into the target page under its new name.

    Returns:
        Number of resources copied
    """
    if "/Resources" not in target_page.obj:
        target_page.obj["/Resources"] = pikepdf.Dictionary()
    target_resources = target_page.obj["/Resources"]

    copied = 0
    for category in RESOURCE_CATEGORIES:
        if category not in overlay_resources:
            continue
        if category not in target_resources:
            target_resources[category] = pikepdf.Dictionary()

        for name, obj in overlay_resources[category].items():
            if not obj.is_indirect:
                obj = overlay_pdf.make_indirect(obj)
            target_resources[category][renames[str(name)]] = target_pdf.copy_foreign(obj)
            copied += 1
    return copied


def merge_overlay_page(
    target_pdf: pikepdf.Pdf,
    target_page: pikepdf.Page,
    overlay_pdf: pikepdf.Pdf,
    overlay_page: pikepdf.Page,
    prefix: str,
    origin: tuple[float, float] = (0.0, 0.0),
) -> bool:
    """Draw overlay_page on top of target_page.

    Args:
        target_pdf: Owner of target_page
        target_page: Page receiving the overlay
        overlay_pdf: Owner of overlay_page
        overlay_page: Page whose content is stamped on top
        prefix: Resource name prefix; a suffix is added if it clashes
        origin: Lower-left corner of the target MediaBox

    Returns:
        True if anything was merged, False for an empty overlay
    """
    if "/Contents" not in overlay_page.obj:
        return False

    overlay_resources = overlay_page.obj.get("/Resources", pikepdf.Dictionary())
    prefix = unique_prefix(target_page, overlay_resources, prefix)
    renames = _resource_renames(overlay_resources, prefix)
    instructions = rewrite_overlay_content(overlay_page, renames)
    if not instructions:
        return False

    body = pikepdf.unparse_content_stream(instructions)
    head = b"q\n"
    if origin != (0.0, 0.0):
        head += f"1 0 0 1 {origin[0]:.4f} {origin[1]:.4f} cm\n".encode("ascii")
    overlay_stream = pikepdf.Stream(target_pdf, head + body + b"\nQ\n")

    orig_streams = extract_content_streams(
        target_page.obj.get("/Contents"), target_pdf, copy_foreign=False
    )
    streams = []
    if orig_streams:
        streams.append(pikepdf.Stream(target_pdf, b"q\n"))
        streams.extend(orig_streams)
        streams.append(pikepdf.Stream(target_pdf, b"\nQ\n"))
    streams.append(overlay_stream)
    target_page.obj["/Contents"] = pikepdf.Array(streams)

    copied = merge_page_resources(target_page, overlay_pdf, overlay_resources, target_pdf, renames)
    logger.debug(
        f"Merged overlay with {len(instructions)} operators and {copied} resources "
        f"over {len(orig_streams)} original stream(s)"
    )
    return True
