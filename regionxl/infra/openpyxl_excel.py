from __future__ import annotations
import logging
import os, tempfile, shutil
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill

from regionxl.domain.models import Table
from regionxl.errors import ExportFailure
from regionxl.ports.excel_port import ExcelPort

logger = logging.getLogger(__name__)

SHEET_NAME = "Extracted Data"
OUTPUT_FILENAME = "extracted_data.xlsx"

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(fill_type="solid", start_color="EEEEEE", end_color="EEEEEE")

def _clean_cell_value(val):
    """Strip characters Excel refuses to accept."""
    if isinstance(val, str):
        return ILLEGAL_CHARACTERS_RE.sub("", val)
    return val


class OpenpyxlExcel(ExcelPort):
    def write_sheet(self, table: Table, sheet_name: str, target_path: str | Path) -> Path:
        target_dir = Path(target_path).parent
        tmp_path = None
        try:
            target_dir.mkdir(parents=True, exist_ok=True)

            # temp file in the target folder so the final rename stays on one volume
            fd, tmp_path = tempfile.mkstemp(prefix="regionxl_", suffix=".xlsx", dir=target_dir)
            os.close(fd)

            wb = Workbook()
            ws = wb.active
            ws.title = sheet_name
            for row in table:
                ws.append([_clean_cell_value(v) for v in row])

            # first row styled as a header; cosmetic only
            if table:
                for cell in ws[1]:
                    cell.font = HEADER_FONT
                    cell.fill = HEADER_FILL

            wb.save(tmp_path)
            wb.close()

            final = Path(target_path)
            try:
                os.replace(tmp_path, final)
            except OSError:
                if final.exists():
                    final.unlink()
                shutil.move(tmp_path, final)

            logger.info("Wrote %d rows to %s", len(table), final)
            return final

        except Exception as e:
            logger.exception("Writing %s failed", target_path)
            if tmp_path:
                try: os.unlink(tmp_path)
                except OSError: pass
            raise ExportFailure() from e
