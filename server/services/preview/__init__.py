"""Inline preview of stored files, chosen by content type."""

from server.services.preview.factory import PreviewFactory
from server.services.preview.renderers import (
    FallbackPreviewRenderer,
    ImagePreviewRenderer,
    PdfPreviewRenderer,
    PreviewRenderer,
)

__all__ = [
    "PreviewFactory",
    "PreviewRenderer",
    "ImagePreviewRenderer",
    "PdfPreviewRenderer",
    "FallbackPreviewRenderer",
]
