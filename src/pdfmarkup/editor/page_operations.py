"""
PdfMarkup - Page Operations

Rotate, move and delete pages of an open document. Markup follows the
page it was drawn on: reordering renumbers every markup object (history
included) and deleting a page drops the markup on it. None of these
operations adds a markup history step.
"""

from collections.abc import Sequence

from pdfmarkup.editor.document import EditorDocument
from pdfmarkup.editor.page_model import PageTransform
from pdfmarkup.utils.exceptions import InvalidInputError
from pdfmarkup.utils.logger import logger


def _remap_markup(document: EditorDocument, old_order: list[str]) -> None:
    """Renumber markup pages after the sequence changed from old_order."""
    new_positions = {page.id: i for i, page in enumerate(document.pages, 1)}

    def mapping(old_page: int) -> int | None:
        if not 1 <= old_page <= len(old_order):
            return None
        return new_positions.get(old_order[old_page - 1])

    document.store.remap_pages(mapping)


def rotate_page(document: EditorDocument, page_id: str, direction: str) -> PageTransform:
    """Rotate a page a quarter turn ("cw" or "ccw").

    Markup coordinates are left alone; they live in the page's unrotated space.
    """
    page = document.pages.rotate(page_id, direction)
    logger.info(f"Rotated {page_id} {direction}, now {page.rotation}°")
    return page


def set_page_rotation(document: EditorDocument, page_id: str, degrees: int) -> PageTransform:
    """Set a page's extra rotation to a multiple of 90 degrees."""
    if degrees % 90 != 0:
        raise InvalidInputError(f"rotation must be a multiple of 90, got {degrees}", field_name="degrees")

    page = document.pages.get(page_id)
    if page is None:
        raise InvalidInputError(f"no page {page_id!r}", field_name="page_id")

    page.rotation = degrees % 360
    logger.info(f"Set rotation of {page_id} to {page.rotation}°")
    return page


def move_page(document: EditorDocument, from_index: int, to_index: int) -> None:
    """Move a page from one 0-based position to another, carrying its markup."""
    old_order = [page.id for page in document.pages]
    document.pages.move(from_index, to_index)
    _remap_markup(document, old_order)
    logger.info(f"Moved page from position {from_index + 1} to {to_index + 1}")


def reorder_pages(document: EditorDocument, new_order: Sequence[int]) -> None:
    """Reorder pages by listing current 1-based positions in their new order.

    Args:
        document: Document to modify
        new_order: Permutation of 1..page_count
    """
    count = document.pages.page_count
    if sorted(new_order) != list(range(1, count + 1)):
        raise InvalidInputError(
            f"order must list every page from 1 to {count} exactly once", field_name="new_order"
        )

    old_order = [page.id for page in document.pages]
    document.pages.pages = [document.pages.pages[position - 1] for position in new_order]
    _remap_markup(document, old_order)
    logger.info(f"Reordered pages: {list(new_order)}")


def delete_page(document: EditorDocument, page_id: str) -> int:
    """Delete a page and the markup drawn on it.

    Returns:
        The 1-based position the page had
    """
    old_order = [page.id for page in document.pages]
    position = document.pages.delete(page_id)
    _remap_markup(document, old_order)
    logger.info(f"Deleted page {page_id} (was position {position})")
    return position
