"""
PdfMarkup - Geometry Helpers

Pure conversions between screen pixels and native page units, plus the
small amount of plane geometry the editor and the export pass share.

Native units are the page's own unscaled points, measured from the
top-left corner of the unrotated page with y growing downwards.
Screen values are native values multiplied by the current zoom factor.
"""

import math
from dataclasses import dataclass

from pdfmarkup.constants import ARROW_HEAD_ANGLE_DEG, ARROW_HEAD_LENGTH
from pdfmarkup.utils.exceptions import InvalidInputError


@dataclass(frozen=True)
class Point:
    """A 2D point."""

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


def _check_scale(scale: float) -> None:
    if scale <= 0:
        raise InvalidInputError(f"scale must be positive, got {scale}", field_name="scale")


def to_native(value: float, scale: float) -> float:
    """Convert a screen-space scalar to native units."""
    _check_scale(scale)
    return value / scale


def to_screen(value: float, scale: float) -> float:
    """Convert a native scalar to screen pixels."""
    _check_scale(scale)
    return value * scale


def point_to_native(point: Point, scale: float) -> Point:
    return Point(to_native(point.x, scale), to_native(point.y, scale))


def point_to_screen(point: Point, scale: float) -> Point:
    return Point(to_screen(point.x, scale), to_screen(point.y, scale))


def rect_to_native(
    x: float, y: float, width: float, height: float, scale: float
) -> tuple[float, float, float, float]:
    """Convert a screen rectangle to native units.

    A rectangle dragged up or to the left has a negative size; the result
    always has a top-left origin and non-negative width and height.

    Args:
        x: Screen x of the drag origin
        y: Screen y of the drag origin
        width: Signed screen width
        height: Signed screen height
        scale: Zoom factor

    Returns:
        Tuple of (left, top, width, height) in native units
    """
    left = min(x, x + width)
    top = min(y, y + height)
    return (
        to_native(left, scale),
        to_native(top, scale),
        to_native(abs(width), scale),
        to_native(abs(height), scale),
    )


def normalize_rotation(rotation: int) -> int:
    """Normalize an angle to one of 0, 90, 180, 270."""
    rotation = rotation % 360
    if rotation not in (0, 90, 180, 270):
        rotation = round(rotation / 90) * 90 % 360
    return rotation


def rotated_page_size(width: float, height: float, rotation: int) -> tuple[float, float]:
    """Return the displayed size of a page after a clockwise rotation."""
    if normalize_rotation(rotation) in (90, 270):
        return height, width
    return width, height


def view_to_page_point(point: Point, rotation: int, page_width: float, page_height: float) -> Point:
    """Map a point on a rotated page view back to unrotated page space.

    The view shows the page turned clockwise by ``rotation``. Both the
    input point and the result are top-left based native units.

    Args:
        point: Point in the rotated view
        rotation: Clockwise display rotation in degrees
        page_width: Unrotated page width
        page_height: Unrotated page height

    Returns:
        The same location in the page's own coordinates
    """
    rotation = normalize_rotation(rotation)
    if rotation == 90:
        return Point(point.y, page_height - point.x)
    if rotation == 180:
        return Point(page_width - point.x, page_height - point.y)
    if rotation == 270:
        return Point(page_width - point.y, point.x)
    return point


def page_to_view_point(point: Point, rotation: int, page_width: float, page_height: float) -> Point:
    """Inverse of view_to_page_point."""
    rotation = normalize_rotation(rotation)
    if rotation == 90:
        return Point(page_height - point.y, point.x)
    if rotation == 180:
        return Point(page_width - point.x, page_height - point.y)
    if rotation == 270:
        return Point(point.y, page_width - point.x)
    return point


def arrow_head_points(
    start: Point,
    end: Point,
    length: float = ARROW_HEAD_LENGTH,
    angle_deg: float = ARROW_HEAD_ANGLE_DEG,
) -> tuple[Point, Point]:
    """Compute the two barb endpoints of an arrow head at ``end``.

    Works in any orthogonal coordinate system as long as start and end
    share it.
    """
    angle = math.atan2(end.y - start.y, end.x - start.x)
    spread = math.radians(angle_deg)
    left = Point(
        end.x - length * math.cos(angle - spread),
        end.y - length * math.sin(angle - spread),
    )
    right = Point(
        end.x - length * math.cos(angle + spread),
        end.y - length * math.sin(angle + spread),
    )
    return left, right


def point_segment_distance(point: Point, a: Point, b: Point) -> float:
    """Shortest distance from point to the segment a-b."""
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point.x - a.x, point.y - a.y)

    t = ((point.x - a.x) * dx + (point.y - a.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (a.x + t * dx), point.y - (a.y + t * dy))
