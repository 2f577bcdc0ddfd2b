"""Tests for page operations and how markup follows its page."""

import pytest

from pdfmarkup.editor.markup_model import RectangleMarkup, TextMarkup
from pdfmarkup.editor.page_operations import (
    delete_page,
    move_page,
    reorder_pages,
    rotate_page,
    set_page_rotation,
)
from pdfmarkup.utils.exceptions import InvalidInputError


def _pages_of(document):
    return {obj.id: obj.page for obj in document.markup}


class TestRotate:
    def test_rotation_keeps_markup_and_history(self, document):
        document.store.add(RectangleMarkup(id="r", page=1, x=10, y=20, width=30, height=40))
        history = len(document.store.history)
        rotate_page(document, "page-0", "cw")
        assert document.pages.at_position(1).rotation == 90
        assert document.store.get("r").bounds() == (10, 20, 30, 40)
        assert len(document.store.history) == history

    def test_display_rotation(self, document):
        rotate_page(document, "page-1", "ccw")
        assert document.display_rotation(2) == 270

    def test_set_rotation(self, document):
        set_page_rotation(document, "page-2", 450)
        assert document.pages.get("page-2").rotation == 90

    def test_set_rotation_rejects_odd_angles(self, document):
        with pytest.raises(InvalidInputError):
            set_page_rotation(document, "page-0", 45)
        with pytest.raises(InvalidInputError):
            set_page_rotation(document, "page-7", 90)


class TestMoveAndReorder:
    def test_markup_follows_moved_page(self, document):
        document.store.add(TextMarkup(id="t1", page=1, x=0, y=0))
        document.store.add(TextMarkup(id="t3", page=3, x=0, y=0))
        move_page(document, 2, 0)
        assert [p.id for p in document.pages] == ["page-2", "page-0", "page-1"]
        assert _pages_of(document) == {"t1": 2, "t3": 1}

    def test_history_is_remapped(self, document):
        document.store.add(TextMarkup(id="t1", page=1, x=0, y=0))
        document.store.add(TextMarkup(id="t2", page=2, x=0, y=0))
        move_page(document, 0, 2)
        document.undo()
        assert _pages_of(document) == {"t1": 3}
        document.redo()
        assert _pages_of(document) == {"t1": 3, "t2": 1}

    def test_reorder(self, document):
        document.store.add(TextMarkup(id="t2", page=2, x=0, y=0))
        reorder_pages(document, [3, 2, 1])
        assert [p.id for p in document.pages] == ["page-2", "page-1", "page-0"]
        assert _pages_of(document) == {"t2": 2}
        reorder_pages(document, [2, 3, 1])
        assert _pages_of(document) == {"t2": 1}

    def test_reorder_requires_permutation(self, document):
        with pytest.raises(InvalidInputError):
            reorder_pages(document, [1, 1, 2])
        with pytest.raises(InvalidInputError):
            reorder_pages(document, [1, 2])

    def test_page_operations_add_no_history(self, document):
        document.store.add(TextMarkup(id="t1", page=1, x=0, y=0))
        history = len(document.store.history)
        move_page(document, 0, 1)
        reorder_pages(document, [2, 1, 3])
        assert len(document.store.history) == history


class TestDelete:
    def test_delete_drops_markup_and_shifts_later_pages(self, document):
        document.store.add(TextMarkup(id="t1", page=1, x=0, y=0))
        document.store.add(TextMarkup(id="t2", page=2, x=0, y=0))
        document.store.add(TextMarkup(id="t3", page=3, x=0, y=0))
        assert delete_page(document, "page-1") == 2
        assert document.pages.page_count == 2
        assert _pages_of(document) == {"t1": 1, "t3": 2}

    def test_delete_selected_markup_page(self, document):
        document.store.add_and_select(TextMarkup(id="t1", page=1, x=0, y=0))
        delete_page(document, "page-0")
        assert document.store.selected_id is None

    def test_delete_unknown_page(self, document):
        with pytest.raises(InvalidInputError):
            delete_page(document, "page-9")
