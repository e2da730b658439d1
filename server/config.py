"""Configuration settings for the drive server."""

import os
from common.constants import (
    SHARE_LINK_TTL_HOURS,
    ZIP_COMPRESSION_LEVEL,
    ZIP_MAX_FILES,
    ZIP_QUOTA_LIMIT,
    ZIP_QUOTA_WINDOW_SECONDS,
)


DATABASE_PATH = os.environ.get("DRIVE_DATABASE_PATH", "/app/data/metadata.db")

STORAGE_PATH = os.environ.get("DRIVE_STORAGE_PATH", "/app/data/uploads")

LOG_DIR = os.environ.get("DRIVE_LOG_DIR", "/app/data/logs")

SERVER_HOST = os.environ.get("DRIVE_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("DRIVE_PORT", "8000"))

API_KEY_PREFIX = "drv_"

ZIP_QUOTA = int(os.environ.get("DRIVE_ZIP_QUOTA_LIMIT", str(ZIP_QUOTA_LIMIT)))

ZIP_QUOTA_WINDOW = int(os.environ.get("DRIVE_ZIP_QUOTA_WINDOW_SECONDS", str(ZIP_QUOTA_WINDOW_SECONDS)))

ZIP_FILE_LIMIT = int(os.environ.get("DRIVE_ZIP_MAX_FILES", str(ZIP_MAX_FILES)))

ZIP_LEVEL = int(os.environ.get("DRIVE_ZIP_COMPRESSION_LEVEL", str(ZIP_COMPRESSION_LEVEL)))

SHARE_TTL_HOURS = int(os.environ.get("DRIVE_SHARE_LINK_TTL_HOURS", str(SHARE_LINK_TTL_HOURS)))
