"""
PdfMarkup - Markup Model

Typed representation of placed annotations. Every markup kind is its own
frozen dataclass carrying only the fields that kind uses; all geometry is
stored in native page units.
"""

import base64
import binascii
import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from pdfmarkup.constants import DEFAULT_FONT_SIZE, DEFAULT_STROKE_WIDTH, TEXT_LINE_HEIGHT
from pdfmarkup.editor.geometry import Point, point_segment_distance
from pdfmarkup.utils.colors import is_white
from pdfmarkup.utils.exceptions import InvalidInputError
from pdfmarkup.utils.fonts import resolve_font_name, text_width


class Tool(Enum):
    """Editor tools. Every tool except SELECT creates one markup kind."""

    SELECT = "select"
    TEXT = "text"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    LINE = "line"
    ARROW = "arrow"
    FREEHAND = "freehand"
    IMAGE = "image"
    REDACTION = "redaction"


class StrokeStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class FontWeight(Enum):
    NORMAL = "normal"
    BOLD = "bold"


class FontStyle(Enum):
    NORMAL = "normal"
    ITALIC = "italic"


class TextDecoration(Enum):
    NONE = "none"
    UNDERLINE = "underline"


class TextAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Style fields that live on ShapeStyle rather than on the markup itself
STYLE_FIELDS = ("stroke_color", "fill_color", "stroke_width", "stroke_style")


@dataclass(frozen=True)
class ShapeStyle:
    """Stroke and fill of a shape.

    Attributes:
        stroke_color: CSS color of the outline
        fill_color: CSS color of the interior, or "transparent"
        stroke_width: Outline width in native units
        stroke_style: Solid, dashed or dotted outline
    """

    stroke_color: str = "#000000"
    fill_color: str = "transparent"
    stroke_width: float = DEFAULT_STROKE_WIDTH
    stroke_style: StrokeStyle = StrokeStyle.SOLID

    def __post_init__(self) -> None:
        if not isinstance(self.stroke_style, StrokeStyle):
            object.__setattr__(self, "stroke_style", _enum_value(StrokeStyle, self.stroke_style, "stroke_style"))
        if self.stroke_width < 0:
            raise InvalidInputError("stroke width cannot be negative", field_name="stroke_width")

    def to_dict(self) -> dict[str, Any]:
        return {
            "stroke_color": self.stroke_color,
            "fill_color": self.fill_color,
            "stroke_width": self.stroke_width,
            "stroke_style": self.stroke_style.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShapeStyle":
        return cls(
            stroke_color=data.get("stroke_color", "#000000"),
            fill_color=data.get("fill_color", "transparent"),
            stroke_width=float(data.get("stroke_width", DEFAULT_STROKE_WIDTH)),
            stroke_style=_enum_value(StrokeStyle, data.get("stroke_style", "solid"), "stroke_style"),
        )


REDACTION_STYLE = ShapeStyle(
    stroke_color="white",
    fill_color="white",
    stroke_width=0,
    stroke_style=StrokeStyle.SOLID,
)


def _enum_value(enum_cls: type[Enum], value: Any, field_name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(f"unknown {field_name} {value!r}", field_name=field_name) from None


# ============================================================================
# Markup variants
# ============================================================================


@dataclass(frozen=True)
class _Markup:
    """Fields shared by every markup kind.

    ``page`` is the 1-based position of the page in the current visible
    sequence. ``x`` and ``y`` are measured from the page's top-left corner.
    """

    id: str
    page: int
    x: float
    y: float

    kind = Tool.SELECT

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (left, top, width, height) in native units."""
        return (self.x, self.y, 0.0, 0.0)

    def translated(self, dx: float, dy: float):
        return replace(self, x=self.x + dx, y=self.y + dy)

    def moved_to(self, x: float, y: float):
        """Translate so that the anchor point lands on (x, y)."""
        return self.translated(x - self.x, y - self.y)

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        return {"x": self.x * scale, "y": self.y * scale}

    def to_screen(self, scale: float):
        """Project into screen space for rendering. Never store the result."""
        return replace(self, **self._scaled_fields(scale))

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        left, top, width, height = self.bounds()
        return (
            left - tolerance <= point.x <= left + width + tolerance
            and top - tolerance <= point.y <= top + height + tolerance
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        for f in fields(self):
            data[f.name] = _encode_value(getattr(self, f.name))
        return data


@dataclass(frozen=True)
class TextMarkup(_Markup):
    """A text box anchored at its top-left corner."""

    content: str = "Text"
    font_size: float = DEFAULT_FONT_SIZE
    font_family: str = "Helvetica"
    font_weight: FontWeight = FontWeight.NORMAL
    font_style: FontStyle = FontStyle.NORMAL
    text_decoration: TextDecoration = TextDecoration.NONE
    text_align: TextAlign = TextAlign.LEFT
    color: str = "black"
    background_color: str = "transparent"
    opacity: float = 1.0

    kind = Tool.TEXT

    def __post_init__(self) -> None:
        for name, enum_cls in _TEXT_ENUMS.items():
            value = getattr(self, name)
            if not isinstance(value, enum_cls):
                object.__setattr__(self, name, _enum_value(enum_cls, value, name))
        if not 0.0 <= self.opacity <= 1.0:
            raise InvalidInputError(f"opacity must be within [0, 1], got {self.opacity}", field_name="opacity")
        if self.font_size <= 0:
            raise InvalidInputError("font size must be positive", field_name="font_size")

    @property
    def font_name(self) -> str:
        return resolve_font_name(
            self.font_family,
            bold=self.font_weight is FontWeight.BOLD,
            italic=self.font_style is FontStyle.ITALIC,
        )

    @property
    def lines(self) -> list[str]:
        return self.content.split("\n")

    def bounds(self) -> tuple[float, float, float, float]:
        width = max((text_width(line, self.font_name, self.font_size) for line in self.lines), default=0.0)
        height = len(self.lines) * self.font_size * TEXT_LINE_HEIGHT
        return (self.x, self.y, width, height)

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data["font_size"] = self.font_size * scale
        return data


_TEXT_ENUMS: dict[str, type[Enum]] = {
    "font_weight": FontWeight,
    "font_style": FontStyle,
    "text_decoration": TextDecoration,
    "text_align": TextAlign,
}


@dataclass(frozen=True)
class RectangleMarkup(_Markup):
    """An axis-aligned rectangle; white/white/0 styling marks a redaction patch."""

    width: float = 0.0
    height: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)

    kind = Tool.RECTANGLE

    @property
    def is_redaction(self) -> bool:
        return (
            is_white(self.style.stroke_color)
            and is_white(self.style.fill_color)
            and self.style.stroke_width == 0
        )

    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data.update(width=self.width * scale, height=self.height * scale)
        return data


@dataclass(frozen=True)
class EllipseMarkup(_Markup):
    """An ellipse inscribed in its bounding box."""

    width: float = 0.0
    height: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)

    kind = Tool.ELLIPSE

    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data.update(width=self.width * scale, height=self.height * scale)
        return data


@dataclass(frozen=True)
class LineMarkup(_Markup):
    """A straight segment from (x, y) to (end_x, end_y)."""

    end_x: float = 0.0
    end_y: float = 0.0
    style: ShapeStyle = field(default_factory=ShapeStyle)

    kind = Tool.LINE

    def bounds(self) -> tuple[float, float, float, float]:
        left = min(self.x, self.end_x)
        top = min(self.y, self.end_y)
        return (left, top, abs(self.end_x - self.x), abs(self.end_y - self.y))

    def translated(self, dx: float, dy: float):
        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            end_x=self.end_x + dx,
            end_y=self.end_y + dy,
        )

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data.update(end_x=self.end_x * scale, end_y=self.end_y * scale)
        return data

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        distance = point_segment_distance(
            point, Point(self.x, self.y), Point(self.end_x, self.end_y)
        )
        return distance <= max(tolerance, self.style.stroke_width / 2)


@dataclass(frozen=True)
class ArrowMarkup(LineMarkup):
    """A line with a two-barb head at its end point."""

    kind = Tool.ARROW


@dataclass(frozen=True)
class FreehandMarkup(_Markup):
    """A polyline through the recorded pointer path; (x, y) is its first point."""

    points: tuple[Point, ...] = ()
    style: ShapeStyle = field(default_factory=ShapeStyle)

    kind = Tool.FREEHAND

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def bounds(self) -> tuple[float, float, float, float]:
        if not self.points:
            return (self.x, self.y, 0.0, 0.0)
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def translated(self, dx: float, dy: float):
        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            points=tuple(p.translated(dx, dy) for p in self.points),
        )

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data["points"] = tuple(Point(p.x * scale, p.y * scale) for p in self.points)
        return data

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        reach = max(tolerance, self.style.stroke_width / 2)
        if len(self.points) == 1:
            only = self.points[0]
            return math.hypot(point.x - only.x, point.y - only.y) <= reach
        return any(
            point_segment_distance(point, a, b) <= reach
            for a, b in zip(self.points, self.points[1:], strict=False)
        )


@dataclass(frozen=True)
class ImageMarkup(_Markup):
    """An embedded PNG or JPEG bitmap drawn into its box."""

    width: float = 0.0
    height: float = 0.0
    image_data: bytes = b""

    kind = Tool.IMAGE

    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def _scaled_fields(self, scale: float) -> dict[str, Any]:
        data = super()._scaled_fields(scale)
        data.update(width=self.width * scale, height=self.height * scale)
        return data


MarkupObject = (
    TextMarkup
    | RectangleMarkup
    | EllipseMarkup
    | LineMarkup
    | ArrowMarkup
    | FreehandMarkup
    | ImageMarkup
)

_KIND_CLASSES: dict[str, type] = {
    Tool.TEXT.value: TextMarkup,
    Tool.RECTANGLE.value: RectangleMarkup,
    Tool.ELLIPSE.value: EllipseMarkup,
    Tool.LINE.value: LineMarkup,
    Tool.ARROW.value: ArrowMarkup,
    Tool.FREEHAND.value: FreehandMarkup,
    Tool.IMAGE.value: ImageMarkup,
}


def markup_field_names(obj: MarkupObject) -> set[str]:
    """Names of the dataclass fields a markup object accepts."""
    return {f.name for f in fields(obj)}


def is_visible_stroked_shape(obj: MarkupObject) -> bool:
    """True for outlined shapes, excluding text, images and redaction patches."""
    if isinstance(obj, RectangleMarkup):
        return not obj.is_redaction
    return isinstance(obj, EllipseMarkup | LineMarkup | FreehandMarkup)


# ============================================================================
# Dictionary interchange
# ============================================================================


def _encode_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ShapeStyle):
        return value.to_dict()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, tuple):
        return [{"x": p.x, "y": p.y} for p in value]
    return value


def markup_from_dict(data: dict[str, Any]) -> MarkupObject:
    """Create a markup object from its to_dict() form.

    The kind "redaction" is accepted as shorthand for a rectangle with the
    redaction style.

    Args:
        data: Dictionary with a "kind" key and the variant's fields

    Returns:
        New markup object

    Raises:
        InvalidInputError: On an unknown kind, unknown field or bad value
    """
    values = dict(data)
    kind = values.pop("kind", None)

    if kind == Tool.REDACTION.value:
        cls: type = RectangleMarkup
        values["style"] = REDACTION_STYLE
    elif kind in _KIND_CLASSES:
        cls = _KIND_CLASSES[kind]
    else:
        raise InvalidInputError(f"unknown markup kind {kind!r}", field_name="kind")

    allowed = {f.name for f in fields(cls)}
    unknown = set(values) - allowed
    if unknown:
        raise InvalidInputError(f"unknown fields for {kind}: {sorted(unknown)}", field_name=sorted(unknown)[0])

    missing = {"id", "page", "x", "y"} - set(values)
    if missing:
        raise InvalidInputError(f"missing fields: {sorted(missing)}", field_name=sorted(missing)[0])

    if isinstance(values.get("style"), dict):
        values["style"] = ShapeStyle.from_dict(values["style"])
    if "points" in values:
        values["points"] = tuple(Point(float(p["x"]), float(p["y"])) for p in values["points"])
    if isinstance(values.get("image_data"), str):
        try:
            values["image_data"] = base64.b64decode(values["image_data"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError(f"image data is not base64: {e}", field_name="image_data") from e

    values["page"] = int(values["page"])
    return cls(**values)
