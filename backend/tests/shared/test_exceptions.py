"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    LicensorError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)


class TestLicensorError:
    def test_message(self):
        """LicensorError should store message."""
        error = LicensorError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """LicensorError should default code to class name."""
        assert LicensorError("Test error").code == "LicensorError"

    def test_custom_code(self):
        assert LicensorError("Test error", code="CUSTOM_ERROR").code == "CUSTOM_ERROR"

    def test_default_details(self):
        assert LicensorError("Test error").details == {}

    def test_to_dict(self):
        """LicensorError should convert to dict."""
        error = LicensorError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }


class TestSubclasses:
    @pytest.mark.parametrize("error_class", [
        NotFoundError,
        ValidationError,
        ConflictError,
        AuthenticationError,
        AuthorizationError,
    ])
    def test_inherits_from_base(self, error_class):
        error = error_class("boom")
        assert isinstance(error, LicensorError)
        assert error.code == error_class.__name__


class TestExternalServiceError:
    def test_records_service(self):
        error = ExternalServiceError("Gateway down", service="stripe")
        assert error.service == "stripe"
        assert error.details["service"] == "stripe"

    def test_keeps_details(self):
        error = ExternalServiceError("Gateway down", service="stripe", details={"status": 500})
        assert error.details == {"status": 500, "service": "stripe"}
