"""
PdfMarkup - Editor Document

One open document: its source bytes, page sequence, markup store, tool
and style defaults. Sessions and the compositor receive this object
explicitly instead of reaching for shared global state.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from pdfmarkup.editor.markup_model import (
    STYLE_FIELDS,
    FontStyle,
    FontWeight,
    MarkupObject,
    ShapeStyle,
    StrokeStyle,
    TextAlign,
    TextDecoration,
    Tool,
)
from pdfmarkup.editor.markup_store import MarkupStore
from pdfmarkup.editor.page_model import PageSequence
from pdfmarkup.services.compositor import Compositor
from pdfmarkup.services.pdf_info import DocumentInfo, read_document_info
from pdfmarkup.utils.config_manager import EditorSettings
from pdfmarkup.utils.exceptions import InvalidInputError
from pdfmarkup.utils.logger import logger

# Fields a style panel may change on a selected text object
TEXT_STYLE_FIELDS = (
    "color",
    "background_color",
    "font_size",
    "font_family",
    "font_weight",
    "font_style",
    "text_decoration",
    "text_align",
    "opacity",
)

_ENUM_FIELDS = {
    "stroke_style": StrokeStyle,
    "font_weight": FontWeight,
    "font_style": FontStyle,
    "text_decoration": TextDecoration,
    "text_align": TextAlign,
}


@dataclass(frozen=True)
class TextDefaults:
    """Defaults for newly placed text."""

    content: str = "Text"
    font_size: float = 16.0
    font_family: str = "Helvetica"
    color: str = "black"


def _default_id_factory(kind: Tool) -> str:
    return f"{kind.value}-{uuid.uuid4().hex[:12]}"


def _coerce(field_name: str, value: Any) -> Any:
    enum_cls = _ENUM_FIELDS.get(field_name)
    if enum_cls is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(f"unknown {field_name} {value!r}", field_name=field_name) from None


class EditorDocument:
    """An open PDF with its editing state.

    Args:
        source_bytes: Original PDF contents, kept for export
        info: Page geometry read from source_bytes
        settings: Editor settings, defaults if omitted
        id_factory: Callable producing a fresh markup id for a tool
    """

    def __init__(
        self,
        source_bytes: bytes,
        info: DocumentInfo,
        settings: EditorSettings | None = None,
        id_factory: Callable[[Tool], str] | None = None,
    ) -> None:
        self.source_bytes = source_bytes
        self.info = info
        self.settings = settings or EditorSettings()
        self.pages = PageSequence.init(info.page_count, [page.size for page in info.pages])
        self.store = MarkupStore(history_limit=self.settings.history_limit)
        self.tool = Tool.SELECT
        self.scale = 1.0
        self.default_style = ShapeStyle(
            stroke_color=self.settings.stroke_color,
            fill_color=self.settings.fill_color,
            stroke_width=self.settings.stroke_width,
            stroke_style=StrokeStyle(self.settings.stroke_style),
        )
        self.text_defaults = TextDefaults(
            content=self.settings.text_content,
            font_size=self.settings.font_size,
            font_family=self.settings.font_family,
            color=self.settings.text_color,
        )
        self.compositor = Compositor(compress_streams=self.settings.compress_streams)
        self._id_factory = id_factory or _default_id_factory

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        settings: EditorSettings | None = None,
        id_factory: Callable[[Tool], str] | None = None,
    ) -> "EditorDocument":
        """Open a document from PDF bytes.

        Raises:
            DocumentLoadError: If the bytes are not a readable PDF
        """
        info = read_document_info(data)
        logger.info(f"Opened document with {info.page_count} page(s)")
        return cls(data, info, settings=settings, id_factory=id_factory)

    # ------------------------------------------------------------------
    # Page geometry
    # ------------------------------------------------------------------

    def page_size(self, page: int) -> tuple[float, float]:
        """Unrotated native size of a visible page."""
        return self.pages.page_size(page)

    def display_rotation(self, page: int) -> int:
        """Total clockwise rotation a viewer shows for a visible page."""
        transform = self.pages.at_position(page)
        source = self.info.pages[transform.original_index].rotation
        return (source + transform.rotation) % 360

    # ------------------------------------------------------------------
    # Tool and style
    # ------------------------------------------------------------------

    def new_id(self, kind: Tool) -> str:
        return self._id_factory(kind)

    def set_tool(self, tool: Tool) -> None:
        """Switch tools. Switching always drops the selection."""
        self.tool = tool
        self.store.select(None)

    def set_scale(self, scale: float) -> None:
        if scale <= 0:
            raise InvalidInputError(f"scale must be positive, got {scale}", field_name="scale")
        self.scale = scale

    def set_default_style(self, field_name: str, value: Any) -> None:
        """Change the style applied to newly drawn shapes."""
        if field_name not in STYLE_FIELDS:
            raise InvalidInputError(f"unknown style field {field_name!r}", field_name=field_name)
        self.default_style = replace(self.default_style, **{field_name: _coerce(field_name, value)})

    def set_text_default(self, field_name: str, value: Any) -> None:
        """Change the defaults applied to newly placed text."""
        if field_name not in ("content", "font_size", "font_family", "color"):
            raise InvalidInputError(f"unknown text default {field_name!r}", field_name=field_name)
        self.text_defaults = replace(self.text_defaults, **{field_name: value})

    def set_object_style(self, object_id: str, field_name: str, value: Any) -> bool:
        """Change one style field of an existing object.

        Returns:
            False if no object has that id
        """
        if field_name not in STYLE_FIELDS and field_name not in TEXT_STYLE_FIELDS:
            raise InvalidInputError(f"unknown style field {field_name!r}", field_name=field_name)
        return self.store.update(object_id, **{field_name: _coerce(field_name, value)})

    # ------------------------------------------------------------------
    # History and export
    # ------------------------------------------------------------------

    @property
    def markup(self) -> tuple[MarkupObject, ...]:
        return self.store.objects

    def undo(self) -> bool:
        return self.store.undo()

    def redo(self) -> bool:
        return self.store.redo()

    def export(self) -> bytes:
        """Bake markup and page changes into new PDF bytes.

        Raises:
            ExportError: If the export fails or another one is running
        """
        return self.compositor.export(self.source_bytes, self.store.objects, self.pages.pages)
