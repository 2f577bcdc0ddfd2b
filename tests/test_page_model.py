"""Tests for page_model module (PageTransform and PageSequence)."""

import pytest

from pdfmarkup.editor.page_model import DEFAULT_PAGE_SIZE, PageSequence, PageTransform
from pdfmarkup.utils.exceptions import InvalidInputError


def _ids(seq):
    return [p.id for p in seq]


class TestPageTransform:
    def test_default_values(self):
        pt = PageTransform(id="page-0", original_index=0)
        assert pt.rotation == 0

    def test_rotation_normalization(self):
        assert PageTransform(id="page-0", original_index=0, rotation=450).rotation == 90

    def test_rotate_right_and_left(self):
        pt = PageTransform(id="page-0", original_index=0)
        pt.rotate_right()
        assert pt.rotation == 90
        pt.rotate_left()
        pt.rotate_left()
        assert pt.rotation == 270

    def test_rotate_degrees(self):
        pt = PageTransform(id="page-0", original_index=0)
        pt.rotate(180)
        assert pt.rotation == 180

    def test_to_dict_roundtrip(self):
        pt = PageTransform(id="page-3", original_index=3, rotation=90)
        restored = PageTransform.from_dict(pt.to_dict())
        assert restored == pt

    def test_from_dict_fills_id(self):
        assert PageTransform.from_dict({"original_index": 2}).id == "page-2"


class TestPageSequence:
    def test_init(self):
        seq = PageSequence.init(3)
        assert _ids(seq) == ["page-0", "page-1", "page-2"]
        assert [p.original_index for p in seq] == [0, 1, 2]
        assert seq.page_size(2) == DEFAULT_PAGE_SIZE
        assert seq.current_page == 1

    def test_page_sizes_must_match_count(self):
        with pytest.raises(InvalidInputError):
            PageSequence.init(2, [(100, 100)])

    def test_rotate(self):
        seq = PageSequence.init(2)
        assert seq.rotate("page-1", "cw").rotation == 90
        assert seq.rotate("page-1", "ccw").rotation == 0
        assert seq.rotate("page-0", "ccw").rotation == 270

    def test_rotate_bad_direction(self):
        seq = PageSequence.init(1)
        with pytest.raises(InvalidInputError):
            seq.rotate("page-0", "up")
        with pytest.raises(InvalidInputError):
            seq.rotate("page-9", "cw")

    def test_move_uses_splice_semantics(self):
        seq = PageSequence.init(4)
        seq.move(0, 2)
        assert _ids(seq) == ["page-1", "page-2", "page-0", "page-3"]
        seq.move(3, 0)
        assert _ids(seq) == ["page-3", "page-1", "page-2", "page-0"]

    def test_move_out_of_range(self):
        seq = PageSequence.init(2)
        with pytest.raises(InvalidInputError):
            seq.move(0, 2)
        with pytest.raises(InvalidInputError):
            seq.move(-1, 0)

    def test_page_size_follows_source_page(self):
        seq = PageSequence.init(2, [(100, 200), (300, 400)])
        seq.move(1, 0)
        assert seq.page_size(1) == (300, 400)
        assert seq.position_of("page-0") == 2

    def test_delete_clamps_current_page(self):
        seq = PageSequence.init(3)
        seq.set_current_page(3)
        assert seq.delete("page-2") == 3
        assert seq.current_page == 2
        seq.delete("page-0")
        seq.delete("page-1")
        assert seq.page_count == 0
        assert seq.current_page == 1

    def test_set_current_page_clamps(self):
        seq = PageSequence.init(3)
        assert seq.set_current_page(10) == 3
        assert seq.set_current_page(-4) == 1

    def test_at_position_out_of_range(self):
        seq = PageSequence.init(1)
        with pytest.raises(InvalidInputError):
            seq.at_position(2)

    def test_to_dict(self):
        seq = PageSequence.init(1, [(10, 20)])
        assert seq.to_dict() == {
            "pages": [{"id": "page-0", "original_index": 0, "rotation": 0}],
            "page_sizes": [[10, 20]],
            "current_page": 1,
        }
