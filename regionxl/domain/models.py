from __future__ import annotations
import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

Transform = Tuple[float, float, float, float, float, float]
Table = List[List[str]]

@dataclass(frozen=True)
class SelectionRect:
    """Surface pixels, origin top-left, y down. Anchor is always the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, x0: float, y0: float, x1: float, y1: float) -> "SelectionRect":
        return cls(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))

@dataclass(frozen=True)
class PageRect:
    """Page-space rectangle; y is the top edge in PDF coordinates (origin bottom-left, y up)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

@dataclass(frozen=True)
class TextRun:
    text: str
    transform: Transform   # (a, b, c, d, e, f); e/f = anchor in page-space

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def y(self) -> float:
        return self.transform[5]

@dataclass(frozen=True)
class DocumentState:
    page_count: int
    current_page: int = 1   # 1-based

@dataclass(frozen=True)
class PdfUpload:
    name: str
    media_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: str | Path) -> "PdfUpload":
        p = Path(path)
        media_type, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, media_type=media_type or "application/octet-stream", data=p.read_bytes())

@dataclass(frozen=True)
class TableSettings:
    max_row_tokens: int = 5      # a row this long closes; next run starts a new one
    header_min_length: int = 3   # headers must be strictly longer than this

    @classmethod
    def from_env(cls) -> "TableSettings":
        return cls(
            max_row_tokens=_int_env("REGIONXL_ROW_TOKENS", cls.max_row_tokens),
            header_min_length=_int_env("REGIONXL_HEADER_MIN_LEN", cls.header_min_length),
        )

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default

@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"     # "default" | "destructive"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"
