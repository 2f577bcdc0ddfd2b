"""Tests for alignment snapping."""

import pytest

from pdfmarkup.editor.markup_model import RectangleMarkup
from pdfmarkup.editor.snapping import (
    AlignmentGuide,
    GuideOrientation,
    SnapTargets,
    snap_position,
    snap_targets,
)


def _box(x, y, width, height):
    return RectangleMarkup(id=f"box-{x}-{y}", page=1, x=x, y=y, width=width, height=height)


class TestSnapTargets:
    def test_page_fractions_come_first(self):
        targets = snap_targets(600, 800, [_box(100, 300, 50, 50)])
        assert targets.x == (0, 150, 300, 450, 600, 100, 125, 150)
        assert targets.y == (0, 200, 400, 600, 800, 300, 325, 350)

    def test_no_other_objects(self):
        targets = snap_targets(600, 800, [])
        assert len(targets.x) == 5
        assert len(targets.y) == 5


class TestSnapPosition:
    def test_left_edge_snaps_to_other_object(self):
        targets = snap_targets(612, 792, [_box(100, 300, 50, 50)])
        result = snap_position((0, 0), (40, 40), 95, 500, targets, tolerance=8)
        assert result.x == 100
        assert result.y == 500
        assert result.guides == (AlignmentGuide(GuideOrientation.VERTICAL, 100),)

    def test_center_snaps_when_leading_edge_is_far(self):
        targets = snap_targets(600, 800, [])
        result = snap_position((0, 0), (40, 40), 283, 500, targets, tolerance=8)
        assert result.x == 280
        assert result.guides == (AlignmentGuide(GuideOrientation.VERTICAL, 300),)

    def test_trailing_edge_snaps_to_page_edge(self):
        targets = snap_targets(600, 800, [])
        result = snap_position((0, 0), (40, 40), 100, 757, targets, tolerance=8)
        assert result.y == 760
        assert result.guides == (AlignmentGuide(GuideOrientation.HORIZONTAL, 800),)

    def test_first_candidate_in_order_wins(self):
        targets = snap_targets(600, 800, [_box(152, 500, 10, 10)])
        result = snap_position((0, 0), (20, 20), 151, 700, targets, tolerance=8)
        assert result.x == 150

    def test_both_axes(self):
        targets = SnapTargets(x=(50.0,), y=(70.0,))
        result = snap_position((0, 0), (10, 10), 48, 73, targets, tolerance=5)
        assert (result.x, result.y) == (50, 70)
        assert [g.orientation for g in result.guides] == [
            GuideOrientation.VERTICAL,
            GuideOrientation.HORIZONTAL,
        ]

    def test_bounds_offset_is_respected(self):
        # Anchor sits 10 units right of the bounds' left edge
        targets = SnapTargets(x=(100.0,), y=())
        result = snap_position((-10, 0), (20, 20), 112, 0, targets, tolerance=5)
        assert result.x == pytest.approx(110)

    def test_outside_tolerance_is_untouched(self):
        targets = SnapTargets(x=(100.0,), y=(100.0,))
        result = snap_position((0, 0), (10, 10), 120, 130, targets, tolerance=4)
        assert (result.x, result.y) == (120, 130)
        assert result.guides == ()
