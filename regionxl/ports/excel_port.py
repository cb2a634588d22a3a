from pathlib import Path
from typing import Protocol
from regionxl.domain.models import Table

class ExcelPort(Protocol):
    def write_sheet(self, table: Table, sheet_name: str, target_path: str | Path) -> Path: ...
