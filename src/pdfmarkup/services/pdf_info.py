"""
PdfMarkup - PDF Inspection Service

Reads page count, page boxes and inherited rotation from a PDF held in
memory. No drawing or writing happens here.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any

import pikepdf

from pdfmarkup.utils.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)

INHERITABLE_KEYS = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")


@dataclass(frozen=True)
class SourcePageInfo:
    """Geometry of one source page.

    Attributes:
        width: MediaBox width in points
        height: MediaBox height in points
        rotation: Effective /Rotate of the source page (0, 90, 180, 270)
        origin_x: MediaBox lower-left x
        origin_y: MediaBox lower-left y
    """

    width: float
    height: float
    rotation: int = 0
    origin_x: float = 0.0
    origin_y: float = 0.0

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)


@dataclass
class DocumentInfo:
    """Basic information about a PDF document."""

    page_count: int
    pages: list[SourcePageInfo] = field(default_factory=list)
    pdf_version: str = ""
    encrypted: bool = False
    title: str = ""
    file_size_bytes: int = 0

    @property
    def file_size_mb(self) -> float:
        return self.file_size_bytes / (1024 * 1024)


def inherited_attribute(page: pikepdf.Page, key: str) -> Any:
    """Look up a page attribute, walking up the page tree if needed."""
    node = page.obj
    while node is not None:
        if key in node:
            return node[key]
        node = node.get("/Parent")
    return None


def resolve_source_rotation(page: pikepdf.Page) -> int:
    """Resolve the effective /Rotate of a page, including inherited values."""
    rotate = inherited_attribute(page, "/Rotate")
    return int(rotate) % 360 if rotate is not None else 0


def push_inherited_attributes(page: pikepdf.Page) -> None:
    """Copy inheritable attributes onto the page itself.

    Needed before a page is moved into a different page tree.
    """
    for key in INHERITABLE_KEYS:
        if key not in page.obj:
            value = inherited_attribute(page, key)
            if value is not None:
                page.obj[key] = value


def page_geometry(page: pikepdf.Page) -> SourcePageInfo:
    """Read MediaBox and rotation of a pikepdf page."""
    mediabox = inherited_attribute(page, "/MediaBox")
    if mediabox is None:
        raise DocumentLoadError("page has no MediaBox")
    box = [float(v) for v in mediabox]
    left, right = sorted((box[0], box[2]))
    bottom, top = sorted((box[1], box[3]))
    return SourcePageInfo(
        width=right - left,
        height=top - bottom,
        rotation=resolve_source_rotation(page),
        origin_x=left,
        origin_y=bottom,
    )


def read_document_info(data: bytes) -> DocumentInfo:
    """Get page geometry and metadata from PDF bytes.

    Args:
        data: Complete PDF file contents

    Returns:
        DocumentInfo with one SourcePageInfo per page

    Raises:
        DocumentLoadError: If the bytes are not a readable PDF or it has no pages
    """
    if not data:
        raise DocumentLoadError("document is empty")

    try:
        with pikepdf.open(io.BytesIO(data)) as pdf:
            pages = [page_geometry(page) for page in pdf.pages]
            info = DocumentInfo(
                page_count=len(pages),
                pages=pages,
                pdf_version=str(pdf.pdf_version),
                encrypted=pdf.is_encrypted,
                file_size_bytes=len(data),
            )
            if "/Title" in pdf.docinfo:
                info.title = str(pdf.docinfo["/Title"])
    except pikepdf.PasswordError as e:
        raise DocumentLoadError("document is password-protected") from e
    except (pikepdf.PdfError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to read PDF: {e}")
        raise DocumentLoadError(str(e)) from e

    if info.page_count == 0:
        raise DocumentLoadError("document has no pages")

    logger.debug(f"Read document with {info.page_count} page(s)")
    return info
