import pytest

from regionxl.domain.models import PdfUpload
from regionxl.errors import DocumentLoadFailure, InvalidFileType
from regionxl.services.intake import FileIntake, TempRegistry

# Fakes
class FakeDocument:
    def __init__(self, page_count):
        self.page_count = page_count
        self.closed = False
    def get_page(self, page_number):
        raise NotImplementedError
    def close(self):
        self.closed = True
    def __enter__(self):
        return self
    def __exit__(self, *exc):
        self.close()

class FakePdf:
    def __init__(self, page_count=3, error=None):
        self.page_count = page_count
        self.error = error
        self.loaded = []
    def load_document(self, source):
        self.loaded.append(source)
        if self.error:
            raise self.error
        return FakeDocument(self.page_count)

def pdf_upload(name="doc.pdf"):
    return PdfUpload(name=name, media_type="application/pdf", data=b"%PDF-FAKE")


def test_non_pdf_is_rejected_before_loading():
    fake_pdf = FakePdf()
    reg = TempRegistry()
    intake = FileIntake(fake_pdf, reg)

    with pytest.raises(InvalidFileType) as exc:
        intake.open(PdfUpload(name="notes.txt", media_type="text/plain", data=b"hello"))

    assert exc.value.title == "Invalid file type"
    assert fake_pdf.loaded == []
    assert len(reg) == 0

def test_media_type_must_match_exactly():
    intake = FileIntake(FakePdf(), TempRegistry())
    with pytest.raises(InvalidFileType):
        intake.open(PdfUpload(name="doc.pdf", media_type="application/pdf; charset=binary", data=b""))

def test_pdf_is_registered_and_loaded():
    fake_pdf = FakePdf(page_count=3)
    reg = TempRegistry()
    intake = FileIntake(fake_pdf, reg)

    with intake.open(pdf_upload()) as doc:
        assert doc.page_count == 3

    assert doc.closed is True
    assert fake_pdf.loaded == [b"%PDF-FAKE"]
    assert len(reg) == 1

def test_renderer_error_is_surfaced_verbatim():
    intake = FileIntake(FakePdf(error=RuntimeError("broken xref table")), TempRegistry())
    with pytest.raises(DocumentLoadFailure) as exc:
        intake.open(pdf_upload())
    assert exc.value.description == "Failed to load PDF: broken xref table"

def test_renderer_error_without_message():
    intake = FileIntake(FakePdf(error=RuntimeError()), TempRegistry())
    with pytest.raises(DocumentLoadFailure) as exc:
        intake.open(pdf_upload())
    assert exc.value.description == "Failed to load PDF: Unknown error"

def test_registry_tokens_and_clear():
    reg = TempRegistry()
    token = reg.store(pdf_upload("report.pdf"))
    assert token.startswith("temp_") and token.endswith("_report.pdf")
    assert token in reg
    reg.clear_all()
    assert len(reg) == 0
    assert token not in reg

def test_registry_session_releases_on_exit():
    reg = TempRegistry()
    reg.store(pdf_upload("stale.pdf"))
    with reg.session() as scoped:
        assert len(scoped) == 0
        scoped.store(pdf_upload())
        assert len(scoped) == 1
    assert len(reg) == 0

def test_registry_session_releases_on_error():
    reg = TempRegistry()
    with pytest.raises(RuntimeError):
        with reg.session():
            reg.store(pdf_upload())
            raise RuntimeError("boom")
    assert len(reg) == 0

def test_upload_from_path_guesses_media_type(tmp_path):
    pdf = tmp_path / "doc.pdf"
    pdf.write_bytes(b"%PDF-FAKE")
    txt = tmp_path / "notes.txt"
    txt.write_text("hello", encoding="utf-8")

    assert PdfUpload.from_path(pdf) == PdfUpload("doc.pdf", "application/pdf", b"%PDF-FAKE")
    assert PdfUpload.from_path(txt).media_type == "text/plain"
