# regionxl/services/intake.py
from __future__ import annotations
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from regionxl.domain.models import PDF_MEDIA_TYPE, PdfUpload
from regionxl.errors import DocumentLoadFailure, InvalidFileType
from regionxl.ports.pdf_port import DocumentHandle, PdfPort

logger = logging.getLogger(__name__)


class TempRegistry:
    """
    Process-wide scratch registry of uploaded files. Advisory only: nothing is
    written to disk and nothing survives the process.
    """

    def __init__(self):
        self._files: Dict[str, PdfUpload] = {}

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, token: str) -> bool:
        return token in self._files

    def store(self, upload: PdfUpload) -> str:
        token = f"temp_{int(time.time() * 1000)}_{upload.name}"
        self._files[token] = upload
        return token

    def clear_all(self) -> None:
        count = len(self._files)
        self._files.clear()
        logger.debug("Temporary storage cleared (%d entries)", count)

    @contextmanager
    def session(self) -> Iterator["TempRegistry"]:
        """Clear on entry and always clear again on exit."""
        self.clear_all()
        try:
            yield self
        finally:
            self.clear_all()


# shared by the whole process
registry = TempRegistry()


class FileIntake:
    def __init__(self, pdf: PdfPort, temp_registry: Optional[TempRegistry] = None):
        self.pdf = pdf
        self.registry = temp_registry if temp_registry is not None else registry

    def open(self, upload: PdfUpload) -> DocumentHandle:
        """Validate, register and open an upload. Caller owns the returned handle."""
        if upload.media_type != PDF_MEDIA_TYPE:
            logger.warning("Rejected %s: media type %r", upload.name, upload.media_type)
            raise InvalidFileType()

        token = self.registry.store(upload)
        logger.info("Loading PDF %s (%s)", upload.name, token)
        try:
            return self.pdf.load_document(upload.data)
        except Exception as e:
            logger.warning("Renderer rejected %s: %s", upload.name, e)
            raise DocumentLoadFailure(str(e)) from e
