# regionxl/services/table_builder.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from regionxl.common.geometry import contains_anchor, run_anchor
from regionxl.domain.models import PageRect, Table, TableSettings, TextRun, Viewport
from regionxl.errors import InvalidTableStructure, NoTextInSelection

logger = logging.getLogger(__name__)

# ===== Filtering =====

def select_runs(runs: Iterable[TextRun], page_rect: PageRect, viewport: Viewport) -> List[str]:
    """
    Strings of the runs anchored inside page_rect, in emission order.
    Empty and whitespace-only strings are dropped after the position test.
    """
    selected = []
    for run in runs:
        x, y = run_anchor(run, viewport)
        if contains_anchor(page_rect, viewport, x, y):
            selected.append(run.text)
    return [t for t in selected if t and t.strip()]

# ===== Clustering =====

def is_header(text: str, settings: Optional[TableSettings] = None) -> bool:
    settings = settings or TableSettings()
    t = text.strip()
    return t == t.upper() and len(t) > settings.header_min_length

def cluster_rows(texts: Iterable[str], settings: Optional[TableSettings] = None) -> Table:
    """
    Best-effort row reconstruction from runs in reading order.

    A header run, or a last row already holding max_row_tokens words, starts a
    new row; anything else is split on whitespace and appended to the last row.
    A header row is closed: whatever follows it opens the next row.
    """
    settings = settings or TableSettings()
    rows: Table = []
    last_is_header = False
    for text in texts:
        words = text.split()
        header = is_header(text, settings)
        if not rows or header or last_is_header or len(rows[-1]) >= settings.max_row_tokens:
            rows.append(words)
        else:
            rows[-1].extend(words)
        last_is_header = header
    return rows

def normalize_table(rows: Table) -> Table:
    """Pad every row on the right with empty cells up to the widest row."""
    if not rows:
        return []
    max_columns = max(len(r) for r in rows)
    return [list(r) + [""] * (max_columns - len(r)) for r in rows]

# ===== Entry point =====

def build_table(runs: Iterable[TextRun], page_rect: PageRect, viewport: Viewport,
                settings: Optional[TableSettings] = None) -> Table:
    texts = select_runs(runs, page_rect, viewport)
    if not texts:
        raise NoTextInSelection()

    rows = cluster_rows(texts, settings)
    if not rows:
        raise InvalidTableStructure()

    table = normalize_table(rows)
    logger.info("Built table: %d rows x %d columns from %d runs", len(table), len(table[0]), len(texts))
    return table
