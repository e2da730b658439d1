"""Renderer selection for file previews."""

from typing import Optional, Sequence

from common.logging_config import get_logger
from server.services.preview.renderers import (
    FallbackPreviewRenderer,
    ImagePreviewRenderer,
    PdfPreviewRenderer,
    PreviewRenderer,
)

logger = get_logger(__name__)


class PreviewFactory:
    """
    Picks the first renderer that supports a content type. A fallback
    renderer is always consulted last, so a renderer is always returned.
    """

    def __init__(self, renderers: Optional[Sequence[PreviewRenderer]] = None):
        if renderers is None:
            renderers = [ImagePreviewRenderer(), PdfPreviewRenderer()]
        self.renderers = list(renderers) + [FallbackPreviewRenderer()]

    def renderer_for(self, content_type: str) -> PreviewRenderer:
        renderer = next(r for r in self.renderers if r.supports(content_type or ""))
        logger.debug(f"Preview of {content_type!r} handled by {type(renderer).__name__}")
        return renderer
