"""Pydantic schemas for image uploads.

This module defines the data models for the upload service:
- UploadedFile: A raw file as received from a multipart request
- UploadResult: API response after a successful upload
- RejectReason: Enum of reasons an upload can be refused
- ValidationResult: Typed outcome of validating a file
- Base64UploadRequest / DeleteRequest / DeleteResponse: Request bodies

Stored files live in folder-scoped directories (uploads/{folder}/) with
UUID-based filenames to prevent collisions. Field names on UploadResult are
camelCase because that is the shape the web and LIFF clients read.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RejectReason(str, Enum):
    """Why an upload was refused.

    Callers branch on these values rather than on the human-readable message.
    """
    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"
    MALFORMED_DATA_URI = "malformed_data_uri"
    INVALID_FOLDER = "invalid_folder"
    NO_FILE = "no_file"
    TOO_MANY_FILES = "too_many_files"


class UploadedFile(BaseModel):
    """A single file as parsed from a multipart request.

    Only lives for the duration of one request; the stored copy on disk is
    the only thing that survives.
    """
    fieldname: str = Field("file", description="Form field the file arrived in")
    originalname: str = Field(..., description="Filename supplied by the client")
    encoding: str = Field("7bit", description="Transfer encoding")
    mimetype: str = Field(..., description="Declared MIME type")
    buffer: bytes = Field(..., description="Raw file content")
    size: int = Field(..., description="File size in bytes")


class UploadResult(BaseModel):
    """Response after a successful upload."""
    url: str = Field(..., description="Public path of the stored file")
    filename: str = Field(..., description="Generated filename on disk")
    originalName: str = Field(..., description="Original filename")
    size: int = Field(..., description="File size in bytes")
    mimeType: str = Field(..., description="MIME type")


class ValidationResult(BaseModel):
    """Outcome of validating a file before it is written."""
    ok: bool
    reason: Optional[RejectReason] = None
    message: Optional[str] = None

    @classmethod
    def accepted(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, reason: RejectReason, message: str) -> "ValidationResult":
        return cls(ok=False, reason=reason, message=message)


class Base64UploadRequest(BaseModel):
    """Request body for POST /api/upload/base64."""
    image: str = Field(..., description="Data URI: data:image/<ext>;base64,<payload>")
    folder: Optional[str] = Field(None, description="Target folder (images, activities, plots)")


class DeleteRequest(BaseModel):
    """Request body for DELETE /api/upload."""
    url: str = Field(..., min_length=1, description="URL of the file to delete")


class DeleteResponse(BaseModel):
    success: bool
