"""Project-wide constants (quota defaults, archive limits, stream sizes)."""

STREAM_PIECE_SIZE_BYTES: int = 64 * 1024  # 64 KiB blob read size

ARCHIVE_CHUNK_SIZE_BYTES: int = 64 * 1024

ZIP_MAX_FILES: int = 5

ZIP_COMPRESSION_LEVEL: int = 9

ZIP_QUOTA_LIMIT: int = 3

ZIP_QUOTA_WINDOW_SECONDS: int = 60

SHARE_LINK_TTL_HOURS: int = 24

RECENT_FILES_LIMIT: int = 10

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
