from pathlib import Path

from regionxl.controllers.extract_controller import EXPORTED, LOADED, NOTHING_SELECTED, ExtractController
from regionxl.domain.models import PdfUpload, TableSettings, TextRun, Viewport
from regionxl.errors import ExportFailure
from regionxl.services.intake import TempRegistry

# Fakes
def run(text, x, y_up):
    return TextRun(text, (1.0, 0.0, 0.0, 1.0, float(x), float(y_up)))

class FakePage:
    def __init__(self, runs, viewport=Viewport(100.0, 200.0)):
        self.runs = runs
        self.viewport = viewport
    def get_text_runs(self):
        return list(self.runs)
    def get_viewport(self):
        return self.viewport
    def render(self, zoom=1.0):
        return b"P6 100 200 255\n", int(100 * zoom), int(200 * zoom)

class FakeDocument:
    def __init__(self, pages, page_error=None):
        self.pages = pages
        self.page_error = page_error
        self.closed = False
    @property
    def page_count(self):
        return len(self.pages)
    def get_page(self, page_number):
        if self.page_error:
            raise self.page_error
        return self.pages[page_number - 1]
    def close(self):
        self.closed = True
    def __enter__(self):
        return self
    def __exit__(self, *exc):
        self.close()

class FakePdf:
    def __init__(self, pages, page_error=None):
        self.pages = pages
        self.page_error = page_error
        self.opened = []
    def load_document(self, source):
        doc = FakeDocument(self.pages, self.page_error)
        self.opened.append(doc)
        return doc

class FakeExcel:
    def __init__(self, error=None):
        self.error = error
        self.calls = []
    def write_sheet(self, table, sheet_name, target_path):
        if self.error:
            raise self.error
        self.calls.append((table, sheet_name, Path(target_path)))
        return Path(target_path)

PAGE_ONE = FakePage([run("NAME", 10, 190), run("Alice", 10, 170), run("Bob", 40, 170)])
PAGE_TWO = FakePage([run("TOTAL", 10, 190), run("42", 60, 190)])

def make_controller(tmp_path, pages=(PAGE_ONE, PAGE_TWO), excel=None, page_error=None):
    fake_pdf = FakePdf(list(pages), page_error)
    fake_xlsx = excel or FakeExcel()
    ctl = ExtractController(pdf=fake_pdf, excel=fake_xlsx, temp_registry=TempRegistry(),
                            output_dir=tmp_path, settings=TableSettings())
    return ctl, fake_pdf, fake_xlsx

def pdf_upload():
    return PdfUpload(name="doc.pdf", media_type="application/pdf", data=b"%PDF-FAKE")

def select(ctl, x0, y0, x1, y1):
    ctl.selection.pointer_down(x0, y0)
    ctl.selection.pointer_move(x1, y1)
    ctl.selection.pointer_up()


def test_open_upload_loads_first_page(tmp_path):
    ctl, fake_pdf, _ = make_controller(tmp_path)

    note = ctl.open_upload(pdf_upload())

    assert note == LOADED
    assert ctl.document.page_count == 2
    assert ctl.document.current_page == 1
    assert len(ctl.intake.registry) == 1

def test_invalid_type_notifies_without_loading(tmp_path):
    ctl, fake_pdf, _ = make_controller(tmp_path)

    note = ctl.open_upload(PdfUpload(name="notes.txt", media_type="text/plain", data=b"hi"))

    assert note.title == "Invalid file type"
    assert note.is_error
    assert fake_pdf.opened == []
    assert ctl.document is None

def test_open_path_of_text_file(tmp_path):
    ctl, fake_pdf, _ = make_controller(tmp_path)
    txt = tmp_path / "notes.txt"
    txt.write_text("hello", encoding="utf-8")

    assert ctl.open_path(txt).title == "Invalid file type"
    assert fake_pdf.opened == []

def test_open_missing_path(tmp_path):
    ctl, _, _ = make_controller(tmp_path)
    note = ctl.open_path(tmp_path / "missing.pdf")
    assert note.is_error
    assert note.description == "Failed to handle the PDF file. Please try again."

def test_export_writes_normalized_table(tmp_path):
    # Arrange
    ctl, _, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    select(ctl, 0, 0, 100, 200)

    # Act
    note = ctl.export(100, 200)

    # Assert
    assert note == EXPORTED
    assert fake_xlsx.calls == [
        ([["NAME", ""], ["Alice", "Bob"]], "Extracted Data", tmp_path / "extracted_data.xlsx")
    ]
    assert ctl.last_output == tmp_path / "extracted_data.xlsx"
    assert ctl.exporting is False

def test_export_reads_the_current_page(tmp_path):
    ctl, _, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    select(ctl, 0, 0, 100, 100)
    ctl.next_page()

    # selection survives page changes
    assert ctl.selection.has_selection
    assert ctl.export(100, 200) == EXPORTED
    assert fake_xlsx.calls[0][0] == [["TOTAL"], ["42"]]

def test_zero_size_selection_writes_nothing(tmp_path):
    ctl, _, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    ctl.selection.pointer_down(0, 0)
    ctl.selection.pointer_up()

    note = ctl.export(100, 200)

    assert note.title == "No text found"
    assert note.is_error
    assert fake_xlsx.calls == []

def test_export_without_selection(tmp_path):
    ctl, _, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    assert ctl.can_export is False
    assert ctl.export(100, 200) == NOTHING_SELECTED
    assert fake_xlsx.calls == []

def test_export_before_layout_reports_surface_not_ready(tmp_path):
    ctl, _, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    select(ctl, 0, 0, 10, 10)

    note = ctl.export(0, 0)

    assert note.title == "Page not ready"
    assert fake_xlsx.calls == []

def test_page_error_is_surfaced_verbatim(tmp_path):
    ctl, _, fake_xlsx = make_controller(tmp_path, page_error=IndexError("page 1 is missing"))
    ctl.open_upload(pdf_upload())
    select(ctl, 0, 0, 100, 200)

    note = ctl.export(100, 200)

    assert note.description == "Failed to load PDF: page 1 is missing"
    assert fake_xlsx.calls == []

def test_writer_failures_become_export_failed(tmp_path):
    for error in (ExportFailure(), PermissionError("locked")):
        ctl, _, _ = make_controller(tmp_path, excel=FakeExcel(error=error))
        ctl.open_upload(pdf_upload())
        select(ctl, 0, 0, 100, 200)

        note = ctl.export(100, 200)

        assert note.title == "Export failed"
        assert ctl.exporting is False
        assert ctl.last_output is None

def test_repeated_exports_are_identical(tmp_path):
    ctl, fake_pdf, fake_xlsx = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    select(ctl, 0, 0, 100, 200)

    ctl.export(100, 200)
    ctl.export(100, 200)

    assert fake_xlsx.calls[0] == fake_xlsx.calls[1]
    # every export re-opens the document and closes it again
    assert all(doc.closed for doc in fake_pdf.opened[1:])

def test_page_navigation_is_clamped(tmp_path):
    ctl, _, _ = make_controller(tmp_path)
    assert ctl.next_page() is None
    ctl.open_upload(pdf_upload())

    assert ctl.previous_page().current_page == 1
    assert ctl.next_page().current_page == 2
    assert ctl.next_page().current_page == 2
    assert ctl.go_to_page(-5).current_page == 1

def test_new_file_clears_selection_and_page(tmp_path):
    ctl, fake_pdf, _ = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    ctl.next_page()
    select(ctl, 0, 0, 10, 10)
    first_handle = fake_pdf.opened[0]

    ctl.open_upload(pdf_upload())

    assert ctl.selection.rect is None
    assert ctl.document.current_page == 1
    assert first_handle.closed is True

def test_render_current_page(tmp_path):
    ctl, _, _ = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())
    ppm, width, height = ctl.render_current_page(1.0)
    assert ppm.startswith(b"P6")
    assert (width, height) == (100, 200)

def test_close_releases_document_and_registry(tmp_path):
    ctl, fake_pdf, _ = make_controller(tmp_path)
    ctl.open_upload(pdf_upload())

    ctl.close()

    assert fake_pdf.opened[0].closed is True
    assert len(ctl.intake.registry) == 0

def test_controller_holds_a_clean_registry_session(tmp_path):
    reg = TempRegistry()
    reg.store(PdfUpload(name="stale.pdf", media_type="application/pdf", data=b""))

    ctl = ExtractController(pdf=FakePdf([PAGE_ONE]), excel=FakeExcel(), temp_registry=reg,
                            output_dir=tmp_path, settings=TableSettings())
    assert len(reg) == 0

    ctl.open_upload(pdf_upload())
    assert len(reg) == 1

    ctl.close()
    ctl.close()
    assert len(reg) == 0
