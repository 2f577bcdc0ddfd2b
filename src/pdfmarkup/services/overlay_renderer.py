"""
PdfMarkup - Overlay Renderer

Draws markup objects onto reportlab canvas pages. Each overlay page has
the unrotated size of the page it will be stamped on; native y (measured
from the top) becomes reportlab's bottom-up y via ``page_height - y``.
"""

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from PIL import Image, UnidentifiedImageError
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pdfmarkup.constants import (
    DASH_PATTERN,
    DOT_PATTERN,
    JPEG_SIGNATURE,
    PNG_SIGNATURE,
    TEXT_BACKGROUND_PAD_X,
    TEXT_BACKGROUND_PAD_Y,
    TEXT_LINE_HEIGHT,
    UNDERLINE_OFFSET,
    UNDERLINE_THICKNESS_RATIO,
)
from pdfmarkup.editor.geometry import Point, arrow_head_points
from pdfmarkup.editor.markup_model import (
    ArrowMarkup,
    EllipseMarkup,
    FreehandMarkup,
    ImageMarkup,
    LineMarkup,
    MarkupObject,
    RectangleMarkup,
    ShapeStyle,
    StrokeStyle,
    TextDecoration,
    TextMarkup,
)
from pdfmarkup.utils.colors import is_white, resolve_color
from pdfmarkup.utils.exceptions import ImageDecodeError
from pdfmarkup.utils.fonts import text_width

logger = logging.getLogger(__name__)


@dataclass
class OverlayPage:
    """Markup to draw on one output page.

    Attributes:
        position: 1-based position of the page in the output
        width: Unrotated MediaBox width
        height: Unrotated MediaBox height
        objects: Markup in paint order
    """

    position: int
    width: float
    height: float
    objects: Sequence[MarkupObject] = field(default_factory=tuple)


@dataclass
class OverlayResult:
    """Rendered overlay PDF and what went into it."""

    pdf_bytes: bytes
    positions: list[int] = field(default_factory=list)
    drawn: int = 0
    skipped: list[str] = field(default_factory=list)


def sniff_image_format(data: bytes) -> str | None:
    """Return "PNG" or "JPEG" from the file signature, else None."""
    if data.startswith(PNG_SIGNATURE):
        return "PNG"
    if data.startswith(JPEG_SIGNATURE):
        return "JPEG"
    return None


def decode_image(obj: ImageMarkup) -> Image.Image:
    """Decode an image markup's bytes with Pillow.

    Raises:
        ImageDecodeError: If the data is not PNG/JPEG or is corrupt
    """
    fmt = sniff_image_format(obj.image_data)
    if fmt is None:
        raise ImageDecodeError(obj.id, "data is neither PNG nor JPEG")

    try:
        image = Image.open(io.BytesIO(obj.image_data), formats=[fmt])
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(obj.id, str(e)) from e

    if image.mode not in ("RGB", "RGBA", "L", "LA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    return image


class OverlayRenderer:
    """Renders markup overlays into a single in-memory PDF."""

    def __init__(self, compress: bool = True) -> None:
        self.compress = compress

    def render(self, pages: Sequence[OverlayPage]) -> OverlayResult:
        """Draw one overlay page per entry that has markup.

        Pages without objects are left out; ``positions`` lists the output
        positions in the order their overlay pages appear.

        Args:
            pages: Overlay descriptions in output order

        Returns:
            OverlayResult with the rendered PDF bytes
        """
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pageCompression=1 if self.compress else 0)
        result = OverlayResult(pdf_bytes=b"")

        for page in pages:
            if not page.objects:
                continue

            c.setPageSize((page.width, page.height))
            for obj in page.objects:
                try:
                    self.draw_object(c, obj, page.height)
                    result.drawn += 1
                except ImageDecodeError as e:
                    logger.warning(f"Skipping markup on page {page.position}: {e}")
                    result.skipped.append(obj.id)
            c.showPage()
            result.positions.append(page.position)

        c.save()
        result.pdf_bytes = buffer.getvalue()
        return result

    def draw_object(self, c: canvas.Canvas, obj: MarkupObject, page_height: float) -> None:
        """Draw a single markup object, dispatching on its kind."""
        if isinstance(obj, TextMarkup):
            self._draw_text(c, obj, page_height)
        elif isinstance(obj, RectangleMarkup):
            self._draw_rectangle(c, obj, page_height)
        elif isinstance(obj, EllipseMarkup):
            self._draw_ellipse(c, obj, page_height)
        elif isinstance(obj, LineMarkup):
            # ArrowMarkup is a LineMarkup
            self._draw_line(c, obj, page_height)
        elif isinstance(obj, FreehandMarkup):
            self._draw_freehand(c, obj, page_height)
        elif isinstance(obj, ImageMarkup):
            self._draw_image(c, obj, page_height)
        else:
            raise TypeError(f"Unsupported markup type: {type(obj).__name__}")

    # ------------------------------------------------------------------
    # Style helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_stroke(c: canvas.Canvas, style: ShapeStyle) -> bool:
        """Set stroke color, width and dash. Returns False if nothing is stroked."""
        stroke = resolve_color(style.stroke_color)
        if stroke is None or style.stroke_width <= 0:
            return False

        c.setStrokeColor(stroke)
        c.setLineWidth(style.stroke_width)
        if style.stroke_style is StrokeStyle.DASHED:
            c.setDash(list(DASH_PATTERN))
        elif style.stroke_style is StrokeStyle.DOTTED:
            c.setDash(list(DOT_PATTERN))
        else:
            c.setDash([])
        return True

    @staticmethod
    def _apply_fill(c: canvas.Canvas, color: str | None) -> bool:
        fill = resolve_color(color)
        if fill is None:
            return False
        c.setFillColor(fill)
        return True

    # ------------------------------------------------------------------
    # Per-kind drawing
    # ------------------------------------------------------------------

    def _draw_text(self, c: canvas.Canvas, obj: TextMarkup, page_height: float) -> None:
        font_name = obj.font_name
        size = obj.font_size
        y_draw = page_height - obj.y

        c.saveState()
        if obj.opacity < 1.0:
            c.setFillAlpha(obj.opacity)
            c.setStrokeAlpha(obj.opacity)

        if self._apply_fill(c, obj.background_color):
            _, _, width, height = obj.bounds()
            c.rect(
                obj.x - TEXT_BACKGROUND_PAD_X,
                y_draw - height - TEXT_BACKGROUND_PAD_Y,
                width + 2 * TEXT_BACKGROUND_PAD_X,
                height + 2 * TEXT_BACKGROUND_PAD_Y,
                stroke=0,
                fill=1,
            )

        color = resolve_color(obj.color) or colors.black
        c.setFillColor(color)
        c.setFont(font_name, size)

        for i, line in enumerate(obj.lines):
            baseline = y_draw - size - i * size * TEXT_LINE_HEIGHT
            c.drawString(obj.x, baseline, line)

            if obj.text_decoration is TextDecoration.UNDERLINE and line:
                underline_y = baseline - UNDERLINE_OFFSET
                c.setStrokeColor(color)
                c.setLineWidth(size * UNDERLINE_THICKNESS_RATIO)
                c.line(obj.x, underline_y, obj.x + text_width(line, font_name, size), underline_y)

        c.restoreState()

    def _draw_rectangle(self, c: canvas.Canvas, obj: RectangleMarkup, page_height: float) -> None:
        width, height = abs(obj.width), abs(obj.height)
        left = min(obj.x, obj.x + obj.width)
        bottom = page_height - min(obj.y, obj.y + obj.height) - height

        c.saveState()
        if is_white(obj.style.stroke_color):
            # White outline means a redaction patch: solid white, no border
            c.setFillColor(colors.white)
            c.rect(left, bottom, width, height, stroke=0, fill=1)
        else:
            stroked = self._apply_stroke(c, obj.style)
            filled = self._apply_fill(c, obj.style.fill_color)
            if stroked or filled:
                c.rect(left, bottom, width, height, stroke=int(stroked), fill=int(filled))
        c.restoreState()

    def _draw_ellipse(self, c: canvas.Canvas, obj: EllipseMarkup, page_height: float) -> None:
        y_draw = page_height - obj.y
        cx = obj.x + obj.width / 2
        cy = y_draw - obj.height / 2
        rx = abs(obj.width / 2)
        ry = abs(obj.height / 2)

        c.saveState()
        stroked = self._apply_stroke(c, obj.style)
        filled = self._apply_fill(c, obj.style.fill_color)
        if stroked or filled:
            c.ellipse(cx - rx, cy - ry, cx + rx, cy + ry, stroke=int(stroked), fill=int(filled))
        c.restoreState()

    def _draw_line(self, c: canvas.Canvas, obj: LineMarkup, page_height: float) -> None:
        start = Point(obj.x, page_height - obj.y)
        end = Point(obj.end_x, page_height - obj.end_y)

        c.saveState()
        if self._apply_stroke(c, obj.style):
            c.line(start.x, start.y, end.x, end.y)
            if isinstance(obj, ArrowMarkup):
                # barbs are always solid
                c.setDash([])
                for barb in arrow_head_points(start, end):
                    c.line(end.x, end.y, barb.x, barb.y)
        c.restoreState()

    def _draw_freehand(self, c: canvas.Canvas, obj: FreehandMarkup, page_height: float) -> None:
        if len(obj.points) < 2:
            return

        c.saveState()
        if self._apply_stroke(c, obj.style):
            c.setLineCap(1)
            c.setLineJoin(1)
            path = c.beginPath()
            first, *rest = obj.points
            path.moveTo(first.x, page_height - first.y)
            for point in rest:
                path.lineTo(point.x, page_height - point.y)
            c.drawPath(path, stroke=1, fill=0)
        c.restoreState()

    def _draw_image(self, c: canvas.Canvas, obj: ImageMarkup, page_height: float) -> None:
        image = decode_image(obj)
        width, height = abs(obj.width), abs(obj.height)
        if width == 0 or height == 0:
            logger.debug(f"Image {obj.id} has zero size, nothing to draw")
            return

        left = min(obj.x, obj.x + obj.width)
        top = min(obj.y, obj.y + obj.height)
        c.drawImage(
            ImageReader(image),
            left,
            page_height - top - height,
            width=width,
            height=height,
            mask="auto",
        )
