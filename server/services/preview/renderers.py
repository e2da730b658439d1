"""Preview renderers. Each one decides which content types it serves and
the response headers used to show them inline."""

from abc import ABC, abstractmethod
from typing import Dict

from server.exceptions import UnsupportedPreviewError
from server.repositories.file_repository import FileRecord
from server.utils import content_disposition


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


class PreviewRenderer(ABC):
    @abstractmethod
    def supports(self, content_type: str) -> bool:
        pass

    @abstractmethod
    def headers(self, file: FileRecord) -> Dict[str, str]:
        """
        Response headers for showing file inline.

        Raises:
            UnsupportedPreviewError: if the file cannot be previewed
        """
        pass


class ImagePreviewRenderer(PreviewRenderer):
    def supports(self, content_type: str) -> bool:
        return _media_type(content_type).startswith("image/")

    def headers(self, file: FileRecord) -> Dict[str, str]:
        return {
            "Content-Type": file.content_type,
            "Content-Disposition": content_disposition(file.name, "inline"),
        }


class PdfPreviewRenderer(PreviewRenderer):
    def supports(self, content_type: str) -> bool:
        return _media_type(content_type) == "application/pdf"

    def headers(self, file: FileRecord) -> Dict[str, str]:
        return {
            "Content-Type": "application/pdf",
            "Content-Disposition": content_disposition(file.name, "inline"),
        }


class FallbackPreviewRenderer(PreviewRenderer):
    """Accepts every content type and refuses to render it."""

    def supports(self, content_type: str) -> bool:
        return True

    def headers(self, file: FileRecord) -> Dict[str, str]:
        raise UnsupportedPreviewError("Unsupported file type for preview")
