# fitz_pdf.py
from __future__ import annotations
import logging
from typing import List, Tuple

import pymupdf as fitz

from regionxl.domain.models import TextRun, Viewport

logger = logging.getLogger(__name__)


class FitzPage:
    def __init__(self, page: "fitz.Page"):
        self._page = page

    def get_viewport(self) -> Viewport:
        r = self._page.rect
        return Viewport(float(r.width), float(r.height))

    def get_text_runs(self) -> List[TextRun]:
        """
        One run per text span, in content-stream order. The transform carries the
        span's baseline origin converted to page-space (origin bottom-left, y up).
        """
        page_height = float(self._page.rect.height)
        # keep glyphs that run past the page edge; runs are filtered by anchor only
        flags = fitz.TEXTFLAGS_DICT & ~fitz.TEXT_MEDIABOX_CLIP
        data = self._page.get_text("dict", flags=flags, sort=False)
        runs: List[TextRun] = []
        for block in data.get("blocks", []):
            # skip image blocks
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                cos, sin = line.get("dir", (1.0, 0.0))
                for span in line.get("spans", []):
                    bbox = span.get("bbox", (0, 0, 0, 0))
                    ox, oy = span.get("origin", (bbox[0], bbox[3]))
                    size = float(span.get("size", 0.0))
                    # MuPDF's dir is y-down; negate sin for page-space
                    transform = (size * cos, -size * sin, size * sin, size * cos,
                                 float(ox), page_height - float(oy))
                    runs.append(TextRun(span.get("text", ""), transform))
        return runs

    def render(self, zoom: float = 1.0) -> Tuple[bytes, int, int]:
        pix = self._page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
        try:
            return pix.tobytes("ppm"), pix.width, pix.height
        finally:
            del pix


class FitzDocument:
    def __init__(self, doc: "fitz.Document"):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, page_number: int) -> FitzPage:
        # 1-based, like the page counter shown to the user
        if not 1 <= page_number <= self._doc.page_count:
            raise ValueError(f"Invalid page request: {page_number} (document has {self._doc.page_count} pages)")
        return FitzPage(self._doc[page_number - 1])

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    def __enter__(self) -> "FitzDocument":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class FitzPdf:
    def load_document(self, source: bytes) -> FitzDocument:
        doc = fitz.open(stream=source, filetype="pdf")
        try:
            if not doc.is_pdf:
                raise ValueError("Not a valid PDF")
            if doc.page_count == 0:
                raise ValueError("PDF has no pages")
        except Exception:
            doc.close()
            raise
        logger.debug("Opened PDF from %d bytes, %d pages", len(source), doc.page_count)
        return FitzDocument(doc)
