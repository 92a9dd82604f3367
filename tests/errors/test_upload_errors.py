"""Tests for featured image upload errors."""

from techtalk.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
)


class TestImageTooLargeError:
    def test_detail_mentions_limit_and_actual_size(self) -> None:
        error = ImageTooLargeError(max_size_mb=5, actual_size_mb=7.5)

        assert error.status_code == 413
        assert error.detail == "Featured image must be 5MB or smaller (got 7.5MB)"
        assert error.max_size_mb == 5

    def test_without_actual_size(self) -> None:
        assert ImageTooLargeError().detail == "Featured image must be 5MB or smaller"


class TestUnsupportedImageTypeError:
    def test_defaults(self) -> None:
        error = UnsupportedImageTypeError("text/plain")

        assert error.status_code == 415
        assert error.content_type == "text/plain"
        assert error.allowed_types == ["image/jpeg", "image/png", "image/gif"]


def test_invalid_image_is_client_error() -> None:
    assert InvalidImageError().status_code == 400


def test_storage_error_is_server_error() -> None:
    error = StorageError()

    assert isinstance(error, UploadError)
    assert error.status_code == 500
