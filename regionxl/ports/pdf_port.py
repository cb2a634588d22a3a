from typing import List, Protocol, Tuple
from regionxl.domain.models import TextRun, Viewport

class PageHandle(Protocol):
    def get_text_runs(self) -> List[TextRun]: ...
    def get_viewport(self) -> Viewport: ...
    def render(self, zoom: float = 1.0) -> Tuple[bytes, int, int]: ...

class DocumentHandle(Protocol):
    page_count: int
    def get_page(self, page_number: int) -> PageHandle: ...
    def close(self) -> None: ...
    def __enter__(self) -> "DocumentHandle": ...
    def __exit__(self, *exc) -> None: ...

class PdfPort(Protocol):
    def load_document(self, source: bytes) -> DocumentHandle: ...
