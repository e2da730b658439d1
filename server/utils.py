"""Utility helper functions for the drive server."""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import quote


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """
    Get the current time as a timezone-aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def parse_id_list(ids_str: Optional[str]) -> List[str]:
    """
    Parse comma-separated identifiers into a list.

    Args:
        ids_str: Comma-separated ids (e.g., "id1,id2,id3"), or None

    Returns:
        List of trimmed, non-empty ids (empty list for None)
    """
    if not ids_str:
        return []
    return [item.strip() for item in ids_str.split(',') if item.strip()]


def canonical_id(value: Any) -> str:
    """
    Canonical string form used to compare identifiers, so that 123 and
    "123" are the same id.
    """
    return str(value).strip()


def content_disposition(filename: str, disposition: str = "attachment") -> str:
    """
    Build a Content-Disposition header value for an arbitrary filename.

    Non-ASCII names get an ASCII fallback plus an RFC 5987 filename*
    parameter.

    Args:
        filename: Name offered to the client
        disposition: 'attachment' or 'inline'

    Returns:
        Header value
    """
    fallback = filename.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    fallback = "".join(ch if 0x20 <= ord(ch) < 0x7f else "_" for ch in fallback)

    encoded = quote(filename, safe="")
    if encoded == filename and fallback == filename:
        return f'{disposition}; filename="{fallback}"'
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"
