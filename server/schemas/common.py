"""Common schemas used across multiple endpoints."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: bool = True
    message: str
    code: str


class RateLimitedResponse(ErrorResponse):
    """Response model for quota rejections."""
    retry_after_seconds: int
    limit: int
    window_seconds: int


class MessageResponse(BaseModel):
    """Response model for plain acknowledgements."""
    message: str
    id: Optional[str] = None
