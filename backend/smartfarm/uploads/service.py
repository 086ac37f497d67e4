"""Upload service for Smart Farm.

Handles validation, storage on disk and deletion of uploaded images.
Files are stored in: {root_dir}/{folder}/{uuid}.{ext}
and served at:       {url_prefix}/{folder}/{uuid}.{ext}

Nothing is tracked outside the filesystem. A failed batch upload leaves the
files it already wrote in place, and a crash between writing and responding
leaves an orphan; neither is cleaned up automatically.
"""
import base64
import binascii
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from smartfarm.config import UploadSettings

from .schemas import RejectReason, UploadedFile, UploadResult
from .storage import generate_filename
from .validation import UploadValidationError, validate_image

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:image/(\w+);base64,(.+)$")

# Subtypes browsers sometimes declare that map onto an allowed MIME type
_SUBTYPE_ALIASES = {"jpg": "jpeg"}


class UploadService:
    """Service for storing and deleting uploaded images."""

    def __init__(self, settings: Optional[UploadSettings] = None):
        self.settings = settings or UploadSettings()
        self.root = Path(self.settings.root_dir)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_folder(self, folder: Optional[str]) -> str:
        """Return the folder to write into, or raise if it is not allowed."""
        folder = folder or self.settings.default_folder
        if folder not in self.settings.folders:
            raise UploadValidationError(
                RejectReason.INVALID_FOLDER,
                f"Invalid folder '{folder}' (allowed: {', '.join(self.settings.folders)})",
            )
        return folder

    def _store(self, folder: str, filename: str, content: bytes) -> Path:
        file_path = self.root / folder / filename
        file_path.write_bytes(content)
        logger.info(f"Saved file: {file_path} ({len(content)} bytes)")
        return file_path

    def _url_for(self, folder: str, filename: str) -> str:
        return f"{self.settings.url_prefix}/{folder}/{filename}"

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def upload_one(self, file: UploadedFile, folder: Optional[str] = "images") -> UploadResult:
        """Validate and store a single image.

        Args:
            file: The uploaded file
            folder: Target folder (images, activities, plots)

        Returns:
            UploadResult describing the stored file

        Raises:
            UploadValidationError: If the folder, type or size is rejected.
                Nothing is written in that case.
            OSError: If the write itself fails
        """
        folder = self._check_folder(folder)

        result = validate_image(
            file.mimetype,
            file.size,
            allowed_types=self.settings.allowed_mime_types,
            max_size=self.settings.max_file_size_bytes,
        )
        if not result.ok:
            logger.info(f"Rejected upload {file.originalname!r}: {result.reason.value}")
            raise UploadValidationError.from_result(result)

        filename = generate_filename(original_name=file.originalname)
        self._store(folder, filename, file.buffer)

        return UploadResult(
            url=self._url_for(folder, filename),
            filename=filename,
            originalName=file.originalname,
            size=file.size,
            mimeType=file.mimetype,
        )

    def upload_many(self, files: Iterable[UploadedFile], folder: Optional[str] = "images") -> List[UploadResult]:
        """Store several images one after another, in input order.

        The first rejected file aborts the call. Files written before it are
        not rolled back.
        """
        files = list(files)
        if not files:
            raise UploadValidationError(RejectReason.NO_FILE, "No files provided")
        if len(files) > self.settings.max_files:
            raise UploadValidationError(
                RejectReason.TOO_MANY_FILES,
                f"Too many files (max {self.settings.max_files})",
            )

        results = []
        for file in files:
            results.append(self.upload_one(file, folder))
        return results

    def upload_base64(self, data_uri: str, folder: Optional[str] = "images") -> UploadResult:
        """Decode and store an image sent as a data URI.

        The declared subtype becomes both the file extension and the MIME
        type (``image/<ext>``). The original filename is unknown, so the
        generated filename is reported as ``originalName``.

        Raises:
            UploadValidationError: If the data URI is malformed, the declared
                type is not allowed, the decoded content is too large, or the
                folder is rejected
        """
        folder = self._check_folder(folder)

        match = DATA_URI_PATTERN.match(data_uri or "")
        if not match:
            raise UploadValidationError(RejectReason.MALFORMED_DATA_URI, "Invalid base64 image format")

        ext, payload = match.group(1), match.group(2)
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise UploadValidationError(RejectReason.MALFORMED_DATA_URI, "Invalid base64 image format")

        subtype = ext.lower()
        mime_type = f"image/{subtype}"
        result = validate_image(
            f"image/{_SUBTYPE_ALIASES.get(subtype, subtype)}",
            len(content),
            allowed_types=self.settings.allowed_mime_types,
            max_size=self.settings.max_file_size_bytes,
        )
        if not result.ok:
            logger.info(f"Rejected base64 upload ({mime_type}): {result.reason.value}")
            raise UploadValidationError.from_result(result)

        filename = generate_filename(extension=ext)
        self._store(folder, filename, content)

        return UploadResult(
            url=self._url_for(folder, filename),
            filename=filename,
            originalName=filename,
            size=len(content),
            mimeType=mime_type,
        )

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def resolve_url(self, url: str) -> Optional[Path]:
        """Map a public URL back to a path under the storage root.

        Returns None if the URL is not under the public prefix or points
        outside the root.
        """
        url = url.strip()
        prefix = self.settings.url_prefix
        if "\x00" in url or not url.startswith(prefix + "/"):
            return None
        relative = url[len(prefix):].lstrip("/")

        root = self.root.resolve()
        candidate = (root / relative).resolve()
        if candidate == root or root not in candidate.parents:
            return None
        return candidate

    def delete(self, url: str) -> bool:
        """Delete a stored file by its public URL.

        Returns:
            True if a file was removed, False if it did not exist, lies
            outside the upload root, or could not be removed
        """
        try:
            file_path = self.resolve_url(url)
            if file_path is None:
                logger.warning(f"Refusing to delete outside upload root: {url}")
                return False
            if file_path.is_file():
                file_path.unlink()
                logger.info(f"Deleted file: {file_path}")
                return True
            return False
        except (OSError, ValueError) as e:
            logger.error(f"Delete file error for {url}: {e}")
            return False
