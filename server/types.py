"""Server-specific data type definitions."""

from dataclasses import dataclass, field
from typing import AsyncIterator, Dict


@dataclass(frozen=True)
class ArchiveResult:
    """
    A ready-to-send archive: lazy byte stream, download name and content headers.
    """
    stream: AsyncIterator[bytes]
    filename: str
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/zip"})
