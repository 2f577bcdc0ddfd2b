"""Tests for the export compositor (page order, rotation, markup stamping)."""

import io

import pikepdf
import pytest

from pdfmarkup.editor.document import EditorDocument
from pdfmarkup.editor.geometry import Point
from pdfmarkup.editor.markup_model import (
    REDACTION_STYLE,
    ArrowMarkup,
    EllipseMarkup,
    FreehandMarkup,
    ImageMarkup,
    LineMarkup,
    RectangleMarkup,
    ShapeStyle,
    StrokeStyle,
    TextMarkup,
)
from pdfmarkup.editor.page_model import PageTransform
from pdfmarkup.editor.page_operations import delete_page, move_page, rotate_page
from pdfmarkup.services.compositor import Compositor
from pdfmarkup.utils.exceptions import ExportError, ExportInProgressError


def _open(data: bytes) -> pikepdf.Pdf:
    return pikepdf.open(io.BytesIO(data))


def _instructions(page):
    return list(pikepdf.parse_content_stream(page))


def _operators(page) -> list[str]:
    return [str(instr.operator) for instr in _instructions(page)]


def _strings(page) -> list[str]:
    return [str(instr.operands[0]) for instr in _instructions(page) if str(instr.operator) == "Tj"]


def _operands(page, operator: str) -> list[list[float]]:
    return [
        [float(v) for v in instr.operands]
        for instr in _instructions(page)
        if str(instr.operator) == operator
    ]


def _export_single(document, obj) -> pikepdf.Pdf:
    document.store.add(obj)
    return _open(document.export())


class TestPageOutput:
    def test_untouched_document(self, document):
        with _open(document.export()) as pdf:
            assert len(pdf.pages) == 3
            assert [_strings(p) for p in pdf.pages] == [["Page 1"], ["Page 2"], ["Page 3"]]
            assert all("/Rotate" not in p.obj for p in pdf.pages)

    def test_rotated_reordered_export_keeps_text_on_its_page(self, document):
        document.store.add(TextMarkup(id="t", page=3, x=72, y=72, content="Hello"))
        move_page(document, 2, 0)
        rotate_page(document, "page-2", "cw")

        with _open(document.export()) as pdf:
            first, second, third = pdf.pages
            assert _strings(first) == ["Page 3", "Hello"]
            assert int(first.obj.Rotate) == 90
            assert _strings(second) == ["Page 1"]
            assert _strings(third) == ["Page 2"]
            assert "/Rotate" not in second.obj

    def test_markup_drawn_after_reorder_lands_on_visible_page(self, document):
        move_page(document, 2, 0)
        document.store.add(TextMarkup(id="t", page=2, x=72, y=72, content="Hello"))
        with _open(document.export()) as pdf:
            assert _strings(pdf.pages[1]) == ["Page 1", "Hello"]

    def test_deleted_page_is_left_out(self, document):
        delete_page(document, "page-1")
        with _open(document.export()) as pdf:
            assert [_strings(p) for p in pdf.pages] == [["Page 1"], ["Page 3"]]

    def test_source_rotation_is_added(self, make_pdf):
        document = EditorDocument.from_bytes(make_pdf(2, rotations=[90, 270]))
        rotate_page(document, "page-0", "cw")
        rotate_page(document, "page-1", "cw")
        with _open(document.export()) as pdf:
            assert int(pdf.pages[0].obj.Rotate) == 180
            assert "/Rotate" not in pdf.pages[1].obj

    def test_inherited_rotation_survives(self, make_pdf):
        document = EditorDocument.from_bytes(make_pdf(1, tree_rotation=90))
        assert document.display_rotation(1) == 90
        with _open(document.export()) as pdf:
            assert int(pdf.pages[0].obj.Rotate) == 90

    def test_pages_without_markup_are_not_wrapped(self, document):
        document.store.add(TextMarkup(id="t", page=1, x=10, y=10, content="Hi"))
        with _open(document.export()) as pdf:
            assert _operators(pdf.pages[0])[0] == "q"
            assert _operators(pdf.pages[1])[0] == "BT"


class TestMarkupDrawing:
    def test_overlay_resources_are_prefixed(self, document):
        with _export_single(document, TextMarkup(id="t", page=1, x=10, y=10, content="Hi")) as pdf:
            fonts = [str(name) for name in pdf.pages[0].obj.Resources.Font.keys()]
            assert fonts
            assert all(name.startswith("/Mk1") for name in fonts)

    def test_rectangle_is_flipped_to_bottom_up(self, document):
        rect = RectangleMarkup(id="r", page=1, x=50, y=100, width=200, height=80)
        with _export_single(document, rect) as pdf:
            assert [50, 612, 200, 80] in _operands(pdf.pages[0], "re")

    def test_redaction_is_fill_only(self, document):
        patch = RectangleMarkup(id="x", page=1, x=50, y=100, width=200, height=80, style=REDACTION_STYLE)
        with _export_single(document, patch) as pdf:
            ops = _operators(pdf.pages[0])
            assert "re" in ops
            painting = [op for op in ops if op in {"f", "f*", "S", "s", "B", "B*", "b", "b*"}]
            assert painting and painting[-1] in {"f", "f*"}
            assert not {"S", "s", "B", "B*", "b", "b*"} & set(painting)
            assert [1, 1, 1] in _operands(pdf.pages[0], "rg")

    def test_dashed_stroke(self, document):
        rect = RectangleMarkup(
            id="r", page=1, x=10, y=10, width=50, height=50, style=ShapeStyle(stroke_style=StrokeStyle.DASHED)
        )
        with _export_single(document, rect) as pdf:
            dashes = [
                [float(v) for v in instr.operands[0]]
                for instr in _instructions(pdf.pages[0])
                if str(instr.operator) == "d"
            ]
            assert [5, 5] in dashes

    def test_ellipse_uses_curves(self, document):
        with _export_single(document, EllipseMarkup(id="e", page=1, x=10, y=10, width=80, height=40)) as pdf:
            assert "c" in _operators(pdf.pages[0])

    def test_arrow_adds_two_barbs(self, make_pdf):
        counts = []
        for cls in (LineMarkup, ArrowMarkup):
            document = EditorDocument.from_bytes(make_pdf(1))
            obj = cls(id="l", page=1, x=10, y=10, end_x=200, end_y=10)
            with _export_single(document, obj) as pdf:
                counts.append(_operators(pdf.pages[0]).count("l"))
        assert counts[1] - counts[0] == 2

    def test_freehand_polyline(self, document):
        points = (Point(0, 0), Point(10, 10), Point(20, 5), Point(30, 30))
        with _export_single(document, FreehandMarkup(id="f", page=1, x=0, y=0, points=points)) as pdf:
            assert _operators(pdf.pages[0]).count("l") >= 3

    def test_underlined_text(self, document):
        text = TextMarkup(id="t", page=1, x=10, y=10, content="Hi", text_decoration="underline")
        with _export_single(document, text) as pdf:
            ops = _operators(pdf.pages[0])
            assert "Tj" in ops
            assert "l" in ops

    def test_mediabox_origin_is_honoured(self, make_pdf):
        document = EditorDocument.from_bytes(make_pdf(1, mediabox=(100, 100, 712, 892)))
        with _export_single(document, TextMarkup(id="t", page=1, x=10, y=10, content="Hi")) as pdf:
            assert [1, 0, 0, 1, 100, 100] in _operands(pdf.pages[0], "cm")

    @pytest.mark.parametrize("fmt", ["PNG", "JPEG"])
    def test_image(self, document, make_image, fmt):
        image = ImageMarkup(id="i", page=1, x=10, y=10, width=80, height=40, image_data=make_image(fmt))
        with _export_single(document, image) as pdf:
            assert "Do" in _operators(pdf.pages[0])
            names = [str(name) for name in pdf.pages[0].obj.Resources.XObject.keys()]
            assert all(name.startswith("/Mk1") for name in names)

    def test_transparent_png(self, document, make_image):
        data = make_image("PNG", mode="RGBA")
        image = ImageMarkup(id="i", page=1, x=10, y=10, width=80, height=40, image_data=data)
        with _export_single(document, image) as pdf:
            assert "Do" in _operators(pdf.pages[0])

    def test_bad_image_is_skipped(self, document):
        document.store.add(ImageMarkup(id="bad", page=1, x=0, y=0, width=10, height=10, image_data=b"nope"))
        document.store.add(
            ImageMarkup(id="broken", page=1, x=0, y=0, width=10, height=10, image_data=b"\x89PNG\r\n\x1a\nxx")
        )
        document.store.add(TextMarkup(id="t", page=1, x=10, y=10, content="Hello"))
        with _open(document.export()) as pdf:
            assert "Hello" in _strings(pdf.pages[0])
        report = document.compositor.last_report
        assert report.skipped == ["bad", "broken"]
        assert report.drawn == 1

    def test_orphaned_markup_is_reported(self, document):
        document.store.add(TextMarkup(id="t", page=9, x=0, y=0))
        document.export()
        assert document.compositor.last_report.orphaned == ["t"]

    def test_uncompressed_output(self, pdf_bytes):
        compositor = Compositor(compress_streams=False)
        markup = [TextMarkup(id="t", page=1, x=10, y=10, content="Hello")]
        data = compositor.export(pdf_bytes, markup, [PageTransform("page-0", 0)])
        assert b"Hello" in data


class TestExportErrors:
    def test_concurrent_export_rejected(self, document):
        document.compositor._lock.acquire()
        try:
            assert document.compositor.is_exporting
            with pytest.raises(ExportInProgressError):
                document.export()
        finally:
            document.compositor._lock.release()
        assert not document.compositor.is_exporting
        assert document.export()

    def test_in_progress_is_an_export_error(self):
        assert isinstance(ExportInProgressError(), ExportError)

    def test_unreadable_source(self):
        with pytest.raises(ExportError):
            Compositor().export(b"not a pdf", [], [PageTransform("page-0", 0)])

    def test_missing_source_page(self, pdf_bytes):
        with pytest.raises(ExportError):
            Compositor().export(pdf_bytes, [], [PageTransform("page-7", 7)])

    def test_no_pages(self, document):
        for page_id in ("page-0", "page-1", "page-2"):
            delete_page(document, page_id)
        with pytest.raises(ExportError):
            document.export()
