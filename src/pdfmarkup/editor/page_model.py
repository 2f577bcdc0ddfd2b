"""
PdfMarkup - Page Model

Ordered sequence of page transforms. Each entry says which source page an
output page comes from and how far it is rotated.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from pdfmarkup.editor.geometry import normalize_rotation
from pdfmarkup.utils.exceptions import InvalidInputError

# US Letter in points, used when page sizes are unknown
DEFAULT_PAGE_SIZE: tuple[float, float] = (612.0, 792.0)


@dataclass
class PageTransform:
    """State of a single page in the visible sequence.

    Attributes:
        id: Stable identifier, "page-{original_index}"
        original_index: Source page index (0-indexed, never changes)
        rotation: Extra clockwise rotation in degrees (0, 90, 180, 270)
    """

    id: str
    original_index: int
    rotation: int = 0

    def __post_init__(self) -> None:
        """Normalize rotation angle."""
        self.rotation = normalize_rotation(self.rotation)

    def rotate(self, degrees: int) -> None:
        """Rotate page by specified degrees."""
        self.rotation = normalize_rotation(self.rotation + degrees)

    def rotate_left(self) -> None:
        """Rotate page 90 degrees counter-clockwise."""
        self.rotation = (self.rotation - 90) % 360

    def rotate_right(self) -> None:
        """Rotate page 90 degrees clockwise."""
        self.rotation = (self.rotation + 90) % 360

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "original_index": self.original_index,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PageTransform":
        """Create PageTransform from dictionary.

        Args:
            data: Dictionary with page transform data

        Returns:
            New PageTransform instance
        """
        original_index = data.get("original_index", 0)
        return cls(
            id=data.get("id", f"page-{original_index}"),
            original_index=original_index,
            rotation=data.get("rotation", 0),
        )


@dataclass
class PageSequence:
    """The visible page order of a document being edited.

    Attributes:
        pages: Page transforms in visible order
        page_sizes: Unrotated (width, height) per source page index
        current_page: 1-based visible page the host is showing
    """

    pages: list[PageTransform] = field(default_factory=list)
    page_sizes: list[tuple[float, float]] = field(default_factory=list)
    current_page: int = 1

    @classmethod
    def init(
        cls, page_count: int, page_sizes: Sequence[tuple[float, float]] | None = None
    ) -> "PageSequence":
        """Create a sequence of page_count untouched pages.

        Args:
            page_count: Number of pages in the source document
            page_sizes: Optional source page sizes, one per page

        Returns:
            New PageSequence
        """
        if page_count < 0:
            raise InvalidInputError("page count cannot be negative", field_name="page_count")
        if page_sizes is None:
            page_sizes = [DEFAULT_PAGE_SIZE] * page_count
        elif len(page_sizes) != page_count:
            raise InvalidInputError(
                f"expected {page_count} page sizes, got {len(page_sizes)}", field_name="page_sizes"
            )

        return cls(
            pages=[PageTransform(id=f"page-{i}", original_index=i) for i in range(page_count)],
            page_sizes=list(page_sizes),
        )

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __iter__(self):
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self.pages)

    def get(self, page_id: str) -> PageTransform | None:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def position_of(self, page_id: str) -> int | None:
        """Return the 1-based visible position of a page, or None."""
        for i, page in enumerate(self.pages):
            if page.id == page_id:
                return i + 1
        return None

    def at_position(self, position: int) -> PageTransform:
        """Page transform at a 1-based visible position."""
        if not 1 <= position <= len(self.pages):
            raise InvalidInputError(f"page {position} out of range", field_name="position")
        return self.pages[position - 1]

    def page_size(self, position: int) -> tuple[float, float]:
        """Unrotated native size of the page at a 1-based visible position."""
        page = self.at_position(position)
        return self.page_sizes[page.original_index]

    def set_current_page(self, page: int) -> int:
        """Set the visible page, clamped into [1, page_count]."""
        self.current_page = max(1, min(page, len(self.pages)))
        return self.current_page

    def rotate(self, page_id: str, direction: str) -> PageTransform:
        """Rotate a page a quarter turn.

        Args:
            page_id: Page to rotate
            direction: "cw" for clockwise, "ccw" for counter-clockwise

        Returns:
            The rotated page transform
        """
        page = self.get(page_id)
        if page is None:
            raise InvalidInputError(f"no page {page_id!r}", field_name="page_id")

        if direction == "cw":
            page.rotate_right()
        elif direction == "ccw":
            page.rotate_left()
        else:
            raise InvalidInputError(f"unknown rotation direction {direction!r}", field_name="direction")
        return page

    def move(self, from_index: int, to_index: int) -> None:
        """Move an entry with list splice semantics (remove, then insert).

        Both indices are 0-based positions in the current order.
        """
        count = len(self.pages)
        if not 0 <= from_index < count:
            raise InvalidInputError(f"from index {from_index} out of range", field_name="from_index")
        if not 0 <= to_index < count:
            raise InvalidInputError(f"to index {to_index} out of range", field_name="to_index")

        page = self.pages.pop(from_index)
        self.pages.insert(to_index, page)

    def delete(self, page_id: str) -> int:
        """Remove a page and clamp the current page.

        Returns:
            The 1-based position the page had
        """
        position = self.position_of(page_id)
        if position is None:
            raise InvalidInputError(f"no page {page_id!r}", field_name="page_id")

        del self.pages[position - 1]
        self.set_current_page(self.current_page)
        return position

    def to_dict(self) -> dict:
        return {
            "pages": [p.to_dict() for p in self.pages],
            "page_sizes": [list(size) for size in self.page_sizes],
            "current_page": self.current_page,
        }
