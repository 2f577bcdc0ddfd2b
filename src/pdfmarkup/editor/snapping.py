"""
PdfMarkup - Alignment Snapping

Snaps a dragged object's edges to page fractions and to the edges of
other objects on the same page, and reports the guide lines to draw.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from pdfmarkup.constants import PAGE_SNAP_FRACTIONS
from pdfmarkup.editor.markup_model import MarkupObject


class GuideOrientation(Enum):
    VERTICAL = "vertical"  # line at a fixed x
    HORIZONTAL = "horizontal"  # line at a fixed y


@dataclass(frozen=True)
class AlignmentGuide:
    """A guide line at a native coordinate."""

    orientation: GuideOrientation
    position: float


@dataclass(frozen=True)
class SnapTargets:
    """Candidate coordinates per axis, in priority order."""

    x: tuple[float, ...] = field(default_factory=tuple)
    y: tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SnapResult:
    x: float
    y: float
    guides: tuple[AlignmentGuide, ...] = ()


def snap_targets(page_width: float, page_height: float, others: Iterable[MarkupObject]) -> SnapTargets:
    """Build snap candidates for one page.

    Page fractions come first, followed by the left/center/right and
    top/middle/bottom of every other object.

    Args:
        page_width: Page width in native units
        page_height: Page height in native units
        others: Objects on the page, excluding the one being dragged

    Returns:
        SnapTargets with x and y candidates
    """
    xs = [page_width * f for f in PAGE_SNAP_FRACTIONS]
    ys = [page_height * f for f in PAGE_SNAP_FRACTIONS]

    for obj in others:
        left, top, width, height = obj.bounds()
        xs.extend((left, left + width / 2, left + width))
        ys.extend((top, top + height / 2, top + height))

    return SnapTargets(x=tuple(xs), y=tuple(ys))


def _snap_axis(
    start: float, size: float, candidates: tuple[float, ...], tolerance: float
) -> tuple[float, float] | None:
    """Snap one axis.

    Edges are tried leading, center, trailing; for each edge the first
    candidate within tolerance wins.

    Returns:
        (snapped leading edge, guide position), or None if nothing matched
    """
    for edge_offset in (0.0, size / 2, size):
        edge = start + edge_offset
        for candidate in candidates:
            if abs(edge - candidate) <= tolerance:
                return candidate - edge_offset, candidate
    return None


def snap_position(
    bounds_offset: tuple[float, float],
    size: tuple[float, float],
    candidate_x: float,
    candidate_y: float,
    targets: SnapTargets,
    tolerance: float,
) -> SnapResult:
    """Snap a candidate anchor position.

    Args:
        bounds_offset: (dx, dy) from the object's anchor to its bounds' top-left
        size: (width, height) of the object's bounds
        candidate_x: Proposed anchor x in native units
        candidate_y: Proposed anchor y in native units
        targets: Candidates from snap_targets()
        tolerance: Maximum distance in native units

    Returns:
        SnapResult with the possibly clamped anchor and zero to two guides
    """
    off_x, off_y = bounds_offset
    width, height = size
    x, y = candidate_x, candidate_y
    guides: list[AlignmentGuide] = []

    snapped = _snap_axis(candidate_x + off_x, width, targets.x, tolerance)
    if snapped is not None:
        left, line = snapped
        x = left - off_x
        guides.append(AlignmentGuide(GuideOrientation.VERTICAL, line))

    snapped = _snap_axis(candidate_y + off_y, height, targets.y, tolerance)
    if snapped is not None:
        top, line = snapped
        y = top - off_y
        guides.append(AlignmentGuide(GuideOrientation.HORIZONTAL, line))

    return SnapResult(x=x, y=y, guides=tuple(guides))
