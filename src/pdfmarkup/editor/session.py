"""
PdfMarkup - Editing Session

Turns pointer input on one visible page into markup. Pointer coordinates
arrive in screen pixels relative to the page's top-left corner; every
committed value is converted to native units first.

States:
    Idle      nothing in progress
    Drawing   a shape is being dragged out; only the live preview changes
    Dragging  an existing object follows the pointer via move_live and is
              committed as a single history step on pointer-up
"""

from dataclasses import dataclass

from pdfmarkup.constants import HIT_TOLERANCE_PX, MIN_FREEHAND_POINTS
from pdfmarkup.editor.document import EditorDocument
from pdfmarkup.editor.geometry import Point, point_to_native, rect_to_native, to_native
from pdfmarkup.editor.markup_model import (
    REDACTION_STYLE,
    ArrowMarkup,
    EllipseMarkup,
    FreehandMarkup,
    ImageMarkup,
    LineMarkup,
    MarkupObject,
    RectangleMarkup,
    ShapeStyle,
    TextMarkup,
    Tool,
)
from pdfmarkup.editor.markup_store import MarkupStore
from pdfmarkup.editor.snapping import AlignmentGuide, GuideOrientation, snap_position, snap_targets
from pdfmarkup.utils.exceptions import InvalidInputError
from pdfmarkup.utils.logger import logger

BOX_TOOLS = (Tool.RECTANGLE, Tool.REDACTION, Tool.ELLIPSE, Tool.IMAGE)
SEGMENT_TOOLS = (Tool.LINE, Tool.ARROW)


# ============================================================================
# Live geometry (screen space)
# ============================================================================


@dataclass(frozen=True)
class LiveRect:
    """Rectangle from the drag origin; width and height may be negative."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LiveSegment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class LivePath:
    points: tuple[Point, ...]


LiveShape = LiveRect | LiveSegment | LivePath


# ============================================================================
# Session states
# ============================================================================


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    tool: Tool
    origin: Point
    live: LiveShape


@dataclass(frozen=True)
class Dragging:
    """An object being dragged.

    Attributes:
        object_id: Id of the dragged object
        offset: Pointer offset from the object's screen top-left
        original: The object as it was before the drag started
    """

    object_id: str
    offset: Point
    original: MarkupObject


SessionState = Idle | Drawing | Dragging


@dataclass(frozen=True)
class PendingImage:
    """Rectangle drawn with the image tool, waiting for image bytes (native units)."""

    page: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Preview:
    """What the renderer should draw for a shape in progress."""

    tool: Tool
    shape: LiveShape
    style: ShapeStyle


class EditingSession:
    """Pointer-driven editing on one visible page.

    Args:
        document: Open document whose store and defaults are used
        page_number: 1-based visible page this session handles
    """

    def __init__(self, document: EditorDocument, page_number: int) -> None:
        self.document = document
        self.page_number = page_number
        self.state: SessionState = Idle()
        self.pending_image: PendingImage | None = None
        self._guides: tuple[AlignmentGuide, ...] = ()

    @property
    def store(self) -> MarkupStore:
        return self.document.store

    @property
    def scale(self) -> float:
        return self.document.scale

    @property
    def guides(self) -> tuple[AlignmentGuide, ...]:
        """Active alignment guides in native units."""
        return self._guides

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float, target_id: str | None = None) -> bool:
        """Handle a pointer press at screen (x, y).

        Args:
            x: Screen x relative to the page
            y: Screen y relative to the page
            target_id: Object the host found under the pointer; when omitted
                       the session hit-tests itself

        Returns:
            True if an object took the press and the host should not treat
            it as a click on the empty page
        """
        if self.pending_image is not None or not isinstance(self.state, Idle):
            return False

        tool = self.document.tool
        point = Point(x, y)

        if tool is Tool.SELECT:
            return self._begin_drag(point, target_id)

        if tool is Tool.TEXT:
            self._place_text(point)
        elif tool in BOX_TOOLS:
            self.state = Drawing(tool, point, LiveRect(x, y, 0.0, 0.0))
        elif tool in SEGMENT_TOOLS:
            self.state = Drawing(tool, point, LiveSegment(x, y, x, y))
        elif tool is Tool.FREEHAND:
            self.state = Drawing(tool, point, LivePath((point,)))
        return False

    def pointer_move(self, x: float, y: float) -> None:
        """Handle pointer motion at screen (x, y)."""
        if self.pending_image is not None:
            return

        if isinstance(self.state, Drawing):
            self.state = Drawing(self.state.tool, self.state.origin, self._grow(self.state, Point(x, y)))
        elif isinstance(self.state, Dragging):
            self._drag_to(self.state, Point(x, y))

    def pointer_up(self, x: float | None = None, y: float | None = None) -> MarkupObject | None:
        """Finish the current gesture.

        Returns:
            The object committed by a draw or drag, if any
        """
        if self.pending_image is not None:
            return None
        if x is not None and y is not None:
            self.pointer_move(x, y)

        state = self.state
        self.state = Idle()
        if isinstance(state, Drawing):
            return self._commit_drawing(state)
        if isinstance(state, Dragging):
            return self._commit_drag(state)
        return None

    def cancel(self) -> None:
        """Abandon a draw or drag; a dragged object goes back where it was."""
        if isinstance(self.state, Dragging):
            self.store.restore_live(self.state.original)
        self.state = Idle()
        self._guides = ()

    # ------------------------------------------------------------------
    # Selection and dragging
    # ------------------------------------------------------------------

    def hit_test(self, x: float, y: float) -> MarkupObject | None:
        """Topmost object on this page under screen point (x, y)."""
        point = point_to_native(Point(x, y), self.scale)
        tolerance = to_native(HIT_TOLERANCE_PX, self.scale)
        for obj in reversed(self.store.objects_on_page(self.page_number)):
            if obj.contains(point, tolerance):
                return obj
        return None

    def _begin_drag(self, point: Point, target_id: str | None) -> bool:
        if target_id is None:
            hit = self.hit_test(point.x, point.y)
            target_id = hit.id if hit else None

        obj = self.store.get(target_id) if target_id else None
        if obj is None or obj.page != self.page_number:
            self.store.select(None)
            return False

        self.store.select(obj.id)
        offset = Point(point.x - obj.x * self.scale, point.y - obj.y * self.scale)
        self.state = Dragging(obj.id, offset, obj)
        return True

    def _drag_to(self, state: Dragging, point: Point) -> None:
        obj = self.store.get(state.object_id)
        if obj is None:
            return

        candidate_x = to_native(point.x - state.offset.x, self.scale)
        candidate_y = to_native(point.y - state.offset.y, self.scale)

        left, top, width, height = obj.bounds()
        page_width, page_height = self.document.page_size(self.page_number)
        others = [o for o in self.store.objects_on_page(self.page_number) if o.id != obj.id]
        result = snap_position(
            bounds_offset=(left - obj.x, top - obj.y),
            size=(width, height),
            candidate_x=candidate_x,
            candidate_y=candidate_y,
            targets=snap_targets(page_width, page_height, others),
            tolerance=to_native(self.document.settings.snap_tolerance_px, self.scale),
        )

        self.store.move_live(obj.id, result.x, result.y)
        self._guides = result.guides

    def _commit_drag(self, state: Dragging) -> MarkupObject | None:
        self._guides = ()
        obj = self.store.get(state.object_id)
        if obj is None:
            return None
        # Same values again, so the whole drag becomes one history step
        self.store.update(obj.id, x=obj.x, y=obj.y)
        logger.debug(f"Moved {obj.id} to ({obj.x:.1f}, {obj.y:.1f})")
        return self.store.get(obj.id)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    @staticmethod
    def _grow(state: Drawing, point: Point) -> LiveShape:
        origin = state.origin
        live = state.live
        if isinstance(live, LiveRect):
            return LiveRect(origin.x, origin.y, point.x - origin.x, point.y - origin.y)
        if isinstance(live, LiveSegment):
            return LiveSegment(origin.x, origin.y, point.x, point.y)
        if live.points and live.points[-1] == point:
            return live
        return LivePath(live.points + (point,))

    def _commit_drawing(self, state: Drawing) -> MarkupObject | None:
        live = state.live
        min_size = self.document.settings.min_shape_size_px

        if isinstance(live, LiveRect):
            if abs(live.width) <= min_size and abs(live.height) <= min_size:
                logger.debug(f"Discarded {state.tool.value} below minimum size")
                return None
            x, y, width, height = rect_to_native(live.x, live.y, live.width, live.height, self.scale)
            if state.tool is Tool.IMAGE:
                self.pending_image = PendingImage(self.page_number, x, y, width, height)
                return None
            obj = self._make_box(state.tool, x, y, width, height)

        elif isinstance(live, LiveSegment):
            if abs(live.x2 - live.x1) <= min_size and abs(live.y2 - live.y1) <= min_size:
                logger.debug(f"Discarded {state.tool.value} below minimum size")
                return None
            cls = ArrowMarkup if state.tool is Tool.ARROW else LineMarkup
            obj = cls(
                id=self.document.new_id(state.tool),
                page=self.page_number,
                x=to_native(live.x1, self.scale),
                y=to_native(live.y1, self.scale),
                end_x=to_native(live.x2, self.scale),
                end_y=to_native(live.y2, self.scale),
                style=self.document.default_style,
            )

        else:
            if len(live.points) < MIN_FREEHAND_POINTS:
                logger.debug("Discarded freehand path with too few points")
                return None
            points = tuple(point_to_native(p, self.scale) for p in live.points)
            obj = FreehandMarkup(
                id=self.document.new_id(Tool.FREEHAND),
                page=self.page_number,
                x=points[0].x,
                y=points[0].y,
                points=points,
                style=self.document.default_style,
            )

        self.store.add(obj)
        return obj

    def _make_box(self, tool: Tool, x: float, y: float, width: float, height: float) -> MarkupObject:
        common = dict(
            id=self.document.new_id(tool),
            page=self.page_number,
            x=x,
            y=y,
            width=width,
            height=height,
        )
        if tool is Tool.ELLIPSE:
            return EllipseMarkup(**common, style=self.document.default_style)
        if tool is Tool.REDACTION:
            return RectangleMarkup(**common, style=REDACTION_STYLE)
        return RectangleMarkup(**common, style=self.document.default_style)

    def _place_text(self, point: Point) -> TextMarkup:
        native = point_to_native(point, self.scale)
        defaults = self.document.text_defaults
        obj = TextMarkup(
            id=self.document.new_id(Tool.TEXT),
            page=self.page_number,
            x=native.x,
            y=native.y,
            content=defaults.content,
            font_size=defaults.font_size,
            font_family=defaults.font_family,
            color=defaults.color,
        )
        self.store.add_and_select(obj)
        return obj

    # ------------------------------------------------------------------
    # Out-of-band completion
    # ------------------------------------------------------------------

    def complete_image(self, image_data: bytes) -> ImageMarkup | None:
        """Place the pending image rectangle once its bytes are available."""
        pending = self.pending_image
        if pending is None:
            return None
        if not image_data:
            raise InvalidInputError("image data is empty", field_name="image_data")

        obj = ImageMarkup(
            id=self.document.new_id(Tool.IMAGE),
            page=pending.page,
            x=pending.x,
            y=pending.y,
            width=pending.width,
            height=pending.height,
            image_data=image_data,
        )
        self.store.add_and_select(obj)
        self.pending_image = None
        return obj

    def cancel_image(self) -> None:
        self.pending_image = None

    def commit_text(self, object_id: str, content: str) -> bool:
        """Store edited text content when the text surface loses focus."""
        return self.store.update(object_id, content=content)

    # ------------------------------------------------------------------
    # Rendering projections
    # ------------------------------------------------------------------

    def preview(self) -> Preview | None:
        """Shape being drawn, in screen space, or None."""
        if not isinstance(self.state, Drawing):
            return None
        style = REDACTION_STYLE if self.state.tool is Tool.REDACTION else self.document.default_style
        return Preview(self.state.tool, self.state.live, style)

    def render_objects(self) -> tuple[MarkupObject, ...]:
        """Objects on this page projected into screen space, in paint order."""
        return tuple(obj.to_screen(self.scale) for obj in self.store.objects_on_page(self.page_number))

    def render_guides(self) -> tuple[AlignmentGuide, ...]:
        """Active guides with positions in screen pixels."""
        return tuple(
            AlignmentGuide(guide.orientation, guide.position * self.scale) for guide in self._guides
        )

    def guide_lines(self) -> list[tuple[float, float, float, float]]:
        """Active guides as screen-space segments spanning the page."""
        page_width, page_height = self.document.page_size(self.page_number)
        lines = []
        for guide in self.render_guides():
            if guide.orientation is GuideOrientation.VERTICAL:
                lines.append((guide.position, 0.0, guide.position, page_height * self.scale))
            else:
                lines.append((0.0, guide.position, page_width * self.scale, guide.position))
        return lines
