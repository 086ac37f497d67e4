"""Validation rules for uploaded images.

All checks here are pure functions of their inputs: no I/O, no config lookup.
The service passes in whatever limits it was configured with.
"""
from typing import Iterable

from smartfarm.config import DEFAULT_ALLOWED_MIME_TYPES, DEFAULT_MAX_FILE_SIZE_BYTES

from .schemas import RejectReason, ValidationResult

# Short display names used in the rejection message
_TYPE_LABELS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WebP",
}


class UploadValidationError(ValueError):
    """Raised when an upload is refused before anything is written."""

    def __init__(self, reason: RejectReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message

    @classmethod
    def from_result(cls, result: ValidationResult) -> "UploadValidationError":
        return cls(result.reason, result.message)


def _describe_types(allowed_types: Iterable[str]) -> str:
    return ", ".join(_TYPE_LABELS.get(t, t) for t in allowed_types)


def _describe_size(max_size: int) -> str:
    if max_size % (1024 * 1024) == 0:
        return f"{max_size // (1024 * 1024)}MB"
    return f"{max_size} bytes"


def validate_size(
    byte_size: int,
    max_size: int = DEFAULT_MAX_FILE_SIZE_BYTES,
) -> ValidationResult:
    """Reject anything strictly larger than ``max_size`` bytes."""
    if byte_size > max_size:
        return ValidationResult.rejected(
            RejectReason.TOO_LARGE,
            f"File too large (max {_describe_size(max_size)})",
        )
    return ValidationResult.accepted()


def validate_image(
    mime_type: str,
    byte_size: int,
    allowed_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES,
    max_size: int = DEFAULT_MAX_FILE_SIZE_BYTES,
) -> ValidationResult:
    """Check an image's MIME type and size.

    The type is checked first, so a file that is both the wrong type and
    too large is reported as the wrong type.

    Args:
        mime_type: Declared MIME type (e.g. "image/png")
        byte_size: Size of the content in bytes
        allowed_types: Accepted MIME types
        max_size: Largest accepted size in bytes

    Returns:
        ValidationResult with ok=True, or the reason and message for rejecting
    """
    allowed_types = list(allowed_types)
    if mime_type not in allowed_types:
        return ValidationResult.rejected(
            RejectReason.UNSUPPORTED_TYPE,
            f"Unsupported file type (allowed: {_describe_types(allowed_types)})",
        )
    return validate_size(byte_size, max_size)
