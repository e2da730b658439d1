"""Custom exception classes for the drive server."""


class DriveException(Exception):
    """
    Base exception class for all drive-related errors.
    """
    pass


class UserAlreadyExistsError(DriveException):
    """
    Raised when attempting to register a username that already exists.
    """
    pass


class InvalidCredentialsError(DriveException):
    """
    Raised when login credentials are invalid.
    """
    pass


class InvalidAPIKeyError(DriveException):
    """
    Raised when an API Key is invalid or expired.
    """
    pass


class NotFoundError(DriveException):
    """
    Raised when a requested folder or file does not exist.
    """
    pass


class BlobNotFoundError(NotFoundError):
    """
    Raised when blob storage has no bytes for a storage key.
    """
    pass


class ForbiddenError(DriveException):
    """
    Raised when a user attempts to access a folder or file they don't own.
    """
    pass


class InvalidArgumentError(DriveException):
    """
    Raised when request input fails validation.
    """
    pass


class RateLimitedError(DriveException):
    """
    Raised when a user exceeds the archive quota window.
    """

    def __init__(self, message: str, retry_after_seconds: int, limit: int, window_seconds: int, count: int = 0):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds
        self.limit = limit
        self.window_seconds = window_seconds
        self.count = count


class ArchiveStreamError(DriveException):
    """
    Raised through the archive stream when a blob read or archive write fails.
    """
    pass


class ShareLinkExpiredError(DriveException):
    """
    Raised when a public share link is past its expiry.
    """
    pass


class UnsupportedPreviewError(DriveException):
    """
    Raised when no preview renderer handles a file's content type.
    """
    pass
