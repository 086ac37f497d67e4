"""Unit tests for image validation rules."""

import pytest

from smartfarm.uploads.schemas import RejectReason, ValidationResult
from smartfarm.uploads.validation import (
    UploadValidationError,
    validate_image,
    validate_size,
)

MAX = 5 * 1024 * 1024


class TestValidateImage:
    """Tests for validate_image."""

    @pytest.mark.parametrize("mime", ["image/jpeg", "image/png", "image/gif", "image/webp"])
    def test_allowed_types_accepted(self, mime):
        """Each allowed image type passes."""
        result = validate_image(mime, 1024)
        assert result.ok
        assert result.reason is None

    @pytest.mark.parametrize(
        "mime",
        ["image/svg+xml", "image/bmp", "application/pdf", "text/plain", "", "IMAGE/PNG"],
    )
    def test_other_types_rejected(self, mime):
        """Anything outside the allow-list is refused as unsupported."""
        result = validate_image(mime, 1024)
        assert not result.ok
        assert result.reason == RejectReason.UNSUPPORTED_TYPE
        assert "JPEG, PNG, GIF, WebP" in result.message

    def test_exact_limit_accepted(self):
        """A file of exactly 5MB is still accepted."""
        assert validate_image("image/png", MAX).ok

    def test_one_byte_over_limit_rejected(self):
        """One byte over 5MB is too large."""
        result = validate_image("image/png", MAX + 1)
        assert result.reason == RejectReason.TOO_LARGE
        assert result.message == "File too large (max 5MB)"

    def test_type_checked_before_size(self):
        """Wrong type and too large reports the type."""
        result = validate_image("application/zip", MAX * 2)
        assert result.reason == RejectReason.UNSUPPORTED_TYPE

    def test_custom_limits(self):
        """Limits passed in override the defaults."""
        assert validate_image("image/bmp", 10, allowed_types=["image/bmp"]).ok
        assert validate_image("image/png", 11, max_size=10).reason == RejectReason.TOO_LARGE


class TestValidateSize:
    """Tests for validate_size."""

    def test_under_limit(self):
        assert validate_size(0).ok

    def test_non_megabyte_limit_message(self):
        result = validate_size(2000, max_size=1000)
        assert result.message == "File too large (max 1000 bytes)"


class TestUploadValidationError:
    """Tests for the typed validation error."""

    def test_from_result_keeps_reason_and_message(self):
        result = ValidationResult.rejected(RejectReason.TOO_LARGE, "File too large (max 5MB)")
        error = UploadValidationError.from_result(result)

        assert isinstance(error, ValueError)
        assert error.reason == RejectReason.TOO_LARGE
        assert str(error) == "File too large (max 5MB)"
