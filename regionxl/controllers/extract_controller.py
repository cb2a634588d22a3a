from __future__ import annotations
import logging
import os
from contextlib import ExitStack
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

from regionxl.common.geometry import map_selection_to_page
from regionxl.domain.models import DocumentState, Notification, PdfUpload, Table, TableSettings
from regionxl.errors import DocumentLoadFailure, ExportFailure, RegionXlError
from regionxl.infra.fitz_pdf import FitzPdf
from regionxl.infra.openpyxl_excel import OUTPUT_FILENAME, SHEET_NAME, OpenpyxlExcel
from regionxl.ports.excel_port import ExcelPort
from regionxl.ports.pdf_port import DocumentHandle, PdfPort
from regionxl.services.intake import FileIntake, TempRegistry
from regionxl.services.selection import SelectionTracker
from regionxl.services.table_builder import build_table

logger = logging.getLogger(__name__)

LOADED = Notification("Success", "PDF file loaded successfully.")
EXPORTED = Notification("Export successful", "The selected content has been exported to Excel.")
HANDLE_FAILED = Notification("Error", "Failed to handle the PDF file. Please try again.", "destructive")
NOTHING_SELECTED = Notification("Nothing to export", "Open a PDF and select an area first.", "destructive")


def notification_for(exc: RegionXlError) -> Notification:
    return Notification(exc.title, exc.description, "destructive")

def default_output_dir() -> Path:
    env = os.getenv("REGIONXL_OUTPUT_DIR")
    if env:
        return Path(env)
    downloads = Path.home() / "Downloads"
    return downloads if downloads.is_dir() else Path.cwd()


class ExtractController:
    """
    One user session: the open document, the current page, the selection and
    the export action. Every public action returns a Notification instead of
    raising, so the UI stays usable after any failure.
    """

    def __init__(
        self,
        pdf: Optional[PdfPort] = None,
        excel: Optional[ExcelPort] = None,
        temp_registry: Optional[TempRegistry] = None,
        output_dir: Optional[Path] = None,
        settings: Optional[TableSettings] = None,
    ):
        self.pdf = pdf or FitzPdf()
        self.excel = excel or OpenpyxlExcel()
        self.intake = FileIntake(self.pdf, temp_registry)
        # registry is scratch for this session only: cleared now and again on close()
        self._scope = ExitStack()
        self._scope.enter_context(self.intake.registry.session())
        self.selection = SelectionTracker()
        self.settings = settings or TableSettings.from_env()
        self.output_dir = Path(output_dir) if output_dir else default_output_dir()

        self.upload: Optional[PdfUpload] = None
        self.document: Optional[DocumentState] = None
        self.last_output: Optional[Path] = None
        self.exporting = False
        self._handle: Optional[DocumentHandle] = None

    # ---------------- intake ----------------
    def open_path(self, path: str | Path) -> Notification:
        try:
            upload = PdfUpload.from_path(path)
        except OSError:
            logger.exception("Could not read %s", path)
            return HANDLE_FAILED
        return self.open_upload(upload)

    def open_upload(self, upload: PdfUpload) -> Notification:
        try:
            handle = self.intake.open(upload)
        except RegionXlError as e:
            return notification_for(e)
        except Exception:
            logger.exception("Failed to handle %s", upload.name)
            return HANDLE_FAILED

        # the previous document is only replaced once the new one opened
        self._close_handle()
        self._handle = handle
        self.upload = upload
        self.document = DocumentState(page_count=handle.page_count, current_page=1)
        self.selection.reset()
        logger.info("PDF loaded: %s, %d pages", upload.name, handle.page_count)
        return LOADED

    # ---------------- navigation ----------------
    def go_to_page(self, page_number: int) -> Optional[DocumentState]:
        if self.document is None:
            return None
        page_number = max(1, min(self.document.page_count, page_number))
        self.document = replace(self.document, current_page=page_number)
        return self.document

    def next_page(self) -> Optional[DocumentState]:
        if self.document is None:
            return None
        return self.go_to_page(self.document.current_page + 1)

    def previous_page(self) -> Optional[DocumentState]:
        if self.document is None:
            return None
        return self.go_to_page(self.document.current_page - 1)

    def render_current_page(self, zoom: float = 1.0) -> Tuple[bytes, int, int]:
        """PPM bytes plus pixel size of the current page. Raises DocumentLoadFailure."""
        if self._handle is None or self.document is None:
            raise DocumentLoadFailure("No document loaded")
        try:
            page = self._handle.get_page(self.document.current_page)
            return page.render(zoom)
        except Exception as e:
            logger.exception("Rendering page %s failed", self.document.current_page)
            raise DocumentLoadFailure(str(e)) from e

    # ---------------- export ----------------
    @property
    def can_export(self) -> bool:
        return self.upload is not None and self.selection.has_selection and not self.exporting

    def extract_table(self, surface_width: float, surface_height: float) -> Table:
        """
        Fresh read of the current page: open, fetch page, read runs and viewport,
        one after the other, then map the selection and build the table.
        """
        rect = self.selection.rect
        page_number = self.document.current_page
        try:
            doc = self.pdf.load_document(self.upload.data)
        except Exception as e:
            raise DocumentLoadFailure(str(e)) from e

        with doc:
            try:
                page = doc.get_page(page_number)
            except Exception as e:
                raise DocumentLoadFailure(str(e)) from e
            runs = page.get_text_runs()
            viewport = page.get_viewport()

        page_rect = map_selection_to_page(rect, surface_width, surface_height, viewport)
        logger.debug("Selection %s -> page %d rect %s", rect, page_number, page_rect)
        return build_table(runs, page_rect, viewport, self.settings)

    def export(self, surface_width: float, surface_height: float) -> Notification:
        if self.upload is None or self.document is None or not self.selection.has_selection:
            return NOTHING_SELECTED

        self.exporting = True
        try:
            table = self.extract_table(surface_width, surface_height)
            self.last_output = self.excel.write_sheet(table, SHEET_NAME, self.output_dir / OUTPUT_FILENAME)
            logger.info("Exported %d rows to %s", len(table), self.last_output)
            return EXPORTED
        except RegionXlError as e:
            logger.warning("Export stopped: %s", e)
            return notification_for(e)
        except Exception:
            logger.exception("Export failed")
            return notification_for(ExportFailure())
        finally:
            self.exporting = False

    # ---------------- lifecycle ----------------
    def _close_handle(self) -> None:
        if self._handle is not None:
            try:
                self._handle.close()
            except Exception:
                logger.exception("Closing document failed")
            self._handle = None

    def close(self) -> None:
        self._close_handle()
        self._scope.close()
