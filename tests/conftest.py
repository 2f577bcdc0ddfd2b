"""Pytest configuration for pdfmarkup tests.

Builds PDFs in memory with pikepdf and bitmaps with Pillow, and provides
an open EditorDocument with predictable markup ids.
"""

import io
import itertools

import pikepdf
import pytest
from PIL import Image

from pdfmarkup.editor.document import EditorDocument


def build_pdf(
    num_pages: int = 3,
    mediabox: tuple[float, float, float, float] = (0, 0, 612, 792),
    rotations: list[int] | None = None,
    tree_rotation: int | None = None,
) -> bytes:
    """Create a PDF whose page i shows the text "Page i"."""
    pdf = pikepdf.Pdf.new()
    for i in range(num_pages):
        page_dict = pikepdf.Dictionary(
            Type=pikepdf.Name.Page,
            MediaBox=list(mediabox),
            Contents=pdf.make_stream(f"BT /F1 12 Tf 100 700 Td (Page {i + 1}) Tj ET".encode()),
        )
        if rotations:
            page_dict.Rotate = rotations[i]
        pdf.pages.append(pikepdf.Page(page_dict))
    if tree_rotation is not None:
        pdf.Root.Pages.Rotate = tree_rotation
    buffer = io.BytesIO()
    pdf.save(buffer)
    return buffer.getvalue()


def build_image(fmt: str = "PNG", size: tuple[int, int] = (8, 4), mode: str = "RGB") -> bytes:
    color = (255, 0, 0, 128) if mode == "RGBA" else "red"
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def sequential_ids():
    counter = itertools.count(1)
    return lambda kind: f"{kind.value}-{next(counter)}"


@pytest.fixture
def make_pdf():
    """Factory for in-memory PDFs."""
    return build_pdf


@pytest.fixture
def make_image():
    """Factory for encoded PNG/JPEG bytes."""
    return build_image


@pytest.fixture
def pdf_bytes():
    return build_pdf(3)


@pytest.fixture
def document(pdf_bytes):
    """A 3-page US Letter document at scale 1 with ids like 'rectangle-1'."""
    return EditorDocument.from_bytes(pdf_bytes, id_factory=sequential_ids())
