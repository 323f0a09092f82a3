"""Tests for the directory error hierarchy."""

from __future__ import annotations

import pytest

from phonedir.errors import (
    DirectoryError,
    EmptyDirectoryError,
    SourceMalformedError,
    SourceUnavailableError,
    TransientSourceError,
)


class TestDirectoryErrors:
    """Error kinds map to user messages, retryability and status codes."""

    @pytest.mark.parametrize(
        "error_class, status, retryable",
        [
            (SourceUnavailableError, 404, False),
            (SourceMalformedError, 422, False),
            (EmptyDirectoryError, 422, False),
            (TransientSourceError, 503, True),
        ],
    )
    def test_attributes(self, error_class, status: int, retryable: bool) -> None:
        error = error_class("detail")

        assert isinstance(error, DirectoryError)
        assert error.status_code == status
        assert error.retryable is retryable
        assert error.detail == "detail"

    def test_empty_is_malformed(self) -> None:
        """An empty directory is a malformed source variant."""
        assert issubclass(EmptyDirectoryError, SourceMalformedError)
        assert EmptyDirectoryError.user_message == "El directorio está vacío"

    def test_default_detail(self) -> None:
        error = SourceUnavailableError()

        assert error.detail == SourceUnavailableError.user_message
        assert str(error) == SourceUnavailableError.user_message
