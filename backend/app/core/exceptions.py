"""
Exceptions raised inside the chassis extraction service.

The request pipeline catches these at its boundary and turns them into
structured JSON responses; none of them is fatal to the process.
"""
from typing import Optional


class ChassisServiceError(Exception):
    """Base exception for chassis extraction errors."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class UploadRejectedError(ChassisServiceError):
    """Upload failed screening (size, media type, malformed multipart body)."""


class OCRServiceError(ChassisServiceError):
    """The OCR service answered with an error."""


class ImageStorageError(ChassisServiceError):
    """Persisting an uploaded image failed."""
