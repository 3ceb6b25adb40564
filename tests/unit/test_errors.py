"""Unit tests for error classification utilities."""

import httpx
import pytest

from src.core.errors import (
    ErrorCategory,
    RecordNotFoundError,
    RemoteStoreError,
    classify_remote_error,
    error_message,
)


@pytest.mark.unit
class TestClassifyRemoteError:
    """Tests for classify_remote_error function."""

    def test_connection_refused(self):
        exception = httpx.ConnectError("All connection attempts failed")
        category, message = classify_remote_error(exception)

        assert category == ErrorCategory.NETWORK_ERROR
        assert "connection" in message.lower()

    def test_timeout_by_type(self):
        category, _ = classify_remote_error(TimeoutError())

        assert category == ErrorCategory.NETWORK_ERROR

    def test_gateway_error_in_message(self):
        exception = RemoteStoreError("Failed to fetch fetchReports: Server error '502 Bad Gateway'")
        category, _ = classify_remote_error(exception)

        assert category == ErrorCategory.NETWORK_ERROR

    def test_id_not_found_from_backend(self):
        exception = RemoteStoreError("ID not found")
        category, message = classify_remote_error(exception)

        assert category == ErrorCategory.NOT_FOUND
        assert "not found" in message.lower()

    def test_missing_sheet(self):
        category, _ = classify_remote_error(RemoteStoreError("Sheet missing"))

        assert category == ErrorCategory.NOT_FOUND

    def test_local_record_not_found(self):
        category, _ = classify_remote_error(RecordNotFoundError("Report 9"))

        assert category == ErrorCategory.NOT_FOUND

    def test_network_phrase_wins_over_backend_rejection(self):
        category, _ = classify_remote_error(RemoteStoreError("Lock wait timeout"))

        assert category == ErrorCategory.NETWORK_ERROR

    def test_other_backend_rejection(self):
        category, message = classify_remote_error(RemoteStoreError("Invalid action"))

        assert category == ErrorCategory.REMOTE_FAILURE
        assert "rejected" in message.lower()

    def test_unknown_error(self):
        category, message = classify_remote_error(ValueError("Something odd"))

        assert category == ErrorCategory.UNKNOWN
        assert "unexpected error" in message.lower()

    def test_every_category_is_reachable(self):
        seen = {
            classify_remote_error(error)[0]
            for error in (TimeoutError(), RemoteStoreError("ID not found"), RemoteStoreError("Bad"), ValueError("x"))
        }

        assert seen == set(ErrorCategory)


@pytest.mark.unit
class TestErrorMessage:
    def test_uses_exception_text(self):
        assert error_message(RemoteStoreError("Sheet missing")) == "Sheet missing"

    def test_blank_exception_text(self):
        assert error_message(RuntimeError("  ")) == "Unknown error"

    def test_record_not_found_is_not_quoted(self):
        assert error_message(RecordNotFoundError("Report 9 not found")) == "Report 9 not found"
