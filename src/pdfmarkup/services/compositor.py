"""
PdfMarkup - Export Compositor

Builds the exported document: copies source pages in sequence order,
applies page rotation, and stamps every markup object onto its page.
The result is returned as bytes only after a complete save.
"""

import io
import logging
import threading
import time
from collections.abc import Iterable, Sequence
from contextlib import ExitStack
from dataclasses import dataclass, field

import pikepdf

from pdfmarkup.editor.markup_model import MarkupObject
from pdfmarkup.editor.page_model import PageTransform
from pdfmarkup.services.overlay_renderer import OverlayPage, OverlayRenderer
from pdfmarkup.services.pdf_info import page_geometry, push_inherited_attributes
from pdfmarkup.services.pdf_merge import merge_overlay_page
from pdfmarkup.utils.exceptions import ExportError, ExportInProgressError

logger = logging.getLogger(__name__)

OVERLAY_PREFIX = "Mk"


@dataclass
class ExportReport:
    """Summary of the last export."""

    page_count: int = 0
    drawn: int = 0
    skipped: list[str] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


class Compositor:
    """Merges page transforms and markup into a new PDF.

    Only one export runs at a time per compositor; a second call while
    one is in flight raises ExportInProgressError instead of waiting.
    """

    def __init__(self, compress_streams: bool = True) -> None:
        self.compress_streams = compress_streams
        self.last_report: ExportReport | None = None
        self._lock = threading.Lock()

    @property
    def is_exporting(self) -> bool:
        return self._lock.locked()

    def export(
        self,
        source_bytes: bytes,
        markup: Sequence[MarkupObject],
        pages: Iterable[PageTransform],
    ) -> bytes:
        """Export the edited document.

        Args:
            source_bytes: Original PDF file contents
            markup: All markup objects, in paint order
            pages: Page transforms in output order

        Returns:
            Bytes of the complete output PDF

        Raises:
            ExportInProgressError: If another export is running
            ExportError: If the document could not be produced
        """
        if not self._lock.acquire(blocking=False):
            raise ExportInProgressError()

        try:
            start = time.monotonic()
            logger.info("Export started")
            data, report = self._export(source_bytes, tuple(markup), list(pages))
            report.elapsed_seconds = time.monotonic() - start
            self.last_report = report
            logger.info(
                f"Export finished: {report.page_count} page(s), {report.drawn} object(s) drawn, "
                f"{len(report.skipped)} skipped in {report.elapsed_seconds:.2f}s"
            )
            return data
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Export failed: {e}")
            raise ExportError(str(e)) from e
        finally:
            self._lock.release()

    def _export(
        self,
        source_bytes: bytes,
        markup: tuple[MarkupObject, ...],
        pages: list[PageTransform],
    ) -> tuple[bytes, ExportReport]:
        if not pages:
            raise ExportError("document has no pages to export")

        report = ExportReport(page_count=len(pages))
        report.orphaned = [obj.id for obj in markup if not 1 <= obj.page <= len(pages)]
        if report.orphaned:
            logger.warning(f"Ignoring markup on missing pages: {report.orphaned}")

        with pikepdf.open(io.BytesIO(source_bytes)) as src, pikepdf.new() as out:
            overlays: list[OverlayPage] = []
            origins: dict[int, tuple[float, float]] = {}

            for position, transform in enumerate(pages, 1):
                if not 0 <= transform.original_index < len(src.pages):
                    raise ExportError(
                        f"page {transform.id} refers to missing source page {transform.original_index}"
                    )
                src_page = src.pages[transform.original_index]
                push_inherited_attributes(src_page)
                geometry = page_geometry(src_page)

                out.pages.append(src_page)
                new_page = out.pages[-1]

                final_rotation = (geometry.rotation + transform.rotation) % 360
                if final_rotation != 0:
                    new_page.obj["/Rotate"] = final_rotation
                elif "/Rotate" in new_page.obj:
                    del new_page.obj["/Rotate"]

                if transform.rotation != 0 or geometry.rotation != 0:
                    logger.debug(
                        f"Page {position} rotation: source={geometry.rotation} + "
                        f"editor={transform.rotation} = {final_rotation}"
                    )

                overlays.append(
                    OverlayPage(
                        position=position,
                        width=geometry.width,
                        height=geometry.height,
                        objects=[obj for obj in markup if obj.page == position],
                    )
                )
                origins[position] = (geometry.origin_x, geometry.origin_y)

            rendered = OverlayRenderer(compress=self.compress_streams).render(overlays)
            report.drawn = rendered.drawn
            report.skipped = rendered.skipped

            with ExitStack() as stack:
                # copied overlay streams are read from overlay_pdf when out is saved
                if rendered.positions:
                    overlay_pdf = stack.enter_context(pikepdf.open(io.BytesIO(rendered.pdf_bytes)))
                    for overlay_page, position in zip(overlay_pdf.pages, rendered.positions, strict=True):
                        merge_overlay_page(
                            out,
                            out.pages[position - 1],
                            overlay_pdf,
                            overlay_page,
                            prefix=f"{OVERLAY_PREFIX}{position}",
                            origin=origins[position],
                        )

                buffer = io.BytesIO()
                out.save(buffer, compress_streams=self.compress_streams)
                return buffer.getvalue(), report
