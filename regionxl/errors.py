# regionxl/errors.py
from __future__ import annotations


class RegionXlError(Exception):
    """Base for failures that end up in front of the user as a notification."""
    title = "Error"
    description = "Something went wrong. Please try again."

    def __init__(self, description: str | None = None):
        if description is not None:
            self.description = description
        super().__init__(self.description)


class InvalidFileType(RegionXlError):
    title = "Invalid file type"
    description = "Please select a PDF file."


class DocumentLoadFailure(RegionXlError):
    title = "Error"

    def __init__(self, renderer_message: str = ""):
        self.renderer_message = renderer_message or "Unknown error"
        super().__init__(f"Failed to load PDF: {self.renderer_message}")


class SurfaceNotReady(RegionXlError):
    title = "Page not ready"
    description = "The page has not been drawn yet. Please try again."


class NoTextInSelection(RegionXlError):
    title = "No text found"
    description = "No text was found in the selected area. Try selecting a different area."


class InvalidTableStructure(RegionXlError):
    title = "Invalid table structure"
    description = ("Could not create a valid table from the selected content. "
                   "Please select a different area.")


class ExportFailure(RegionXlError):
    title = "Export failed"
    description = "An error occurred while exporting the content. Please try again."
