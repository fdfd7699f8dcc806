"""
Unit tests for the mail service error taxonomy.
"""
from mail_service.exceptions import (
    DeliveryError,
    MailServiceError,
    MalformedInputError,
    MissingFieldError,
    StartupConfigurationError,
    UnknownEventTypeError,
)


class TestValidationErrors:
    """Tests for request validation errors."""

    def test_missing_field(self):
        """Test missing fields are listed for the caller."""
        error = MissingFieldError(["name", "eventType"])

        assert error.http_status == 400
        assert error.fields == ["name", "eventType"]
        assert error.to_dict()["error"]["message"].endswith("(missing: name, eventType)")

    def test_unknown_event_type(self):
        """Test valid values are suggested to the caller."""
        error = UnknownEventTypeError("archived", ["submission", "approved", "rejected"])

        assert error.http_status == 400
        assert error.to_dict()["error"]["code"] == "UNKNOWN_EVENT_TYPE"
        assert "submission, approved, rejected" in error.user_message

    def test_malformed_input(self):
        """Test the decode reason is passed through."""
        error = MalformedInputError("JSON decode error")

        assert error.user_message == "Bad request: JSON decode error"
        assert isinstance(error, MailServiceError)


class TestDeliveryError:
    """Tests for DeliveryError."""

    def test_internal_detail_not_user_visible(self):
        """Test relay diagnostics stay out of the caller message."""
        error = DeliveryError("a@b.com", "535 Username and Password not accepted")

        assert error.http_status == 500
        assert "535" in error.message
        assert error.to_dict() == {"error": {"code": "DELIVERY_FAILED", "message": "Failed to send email"}}


class TestStartupConfigurationError:
    """Tests for StartupConfigurationError."""

    def test_problems_listed(self):
        """Test every configuration problem is reported."""
        error = StartupConfigurationError(["EMAIL: Field required", "PASSWORD: Field required"])

        assert error.problems == ["EMAIL: Field required", "PASSWORD: Field required"]
        assert "EMAIL" in str(error)
