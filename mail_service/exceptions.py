"""
Mail Service Exception Hierarchy.
Structured errors carrying an error code, HTTP status, and a caller-safe message.
"""
from __future__ import annotations

from typing import Any


class MailServiceError(Exception):
    """Base exception for all mail service errors."""
    error_code: str = "MAIL_SERVICE_ERROR"
    http_status: int = 500

    def __init__(self, message: str, *, user_message: str | None = None,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or "An error occurred. Please try again."
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.error_code, "message": self.user_message}}


# Request validation errors
class RequestRejectedError(MailServiceError):
    """A request that fails validation before any side effect."""
    error_code = "BAD_REQUEST"
    http_status = 400

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, user_message=message, **kwargs)


class MalformedInputError(RequestRejectedError):
    error_code = "MALFORMED_INPUT"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Bad request: {reason}", details={"reason": reason})


class MissingFieldError(RequestRejectedError):
    error_code = "MISSING_FIELD"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            f"Bad request: email, name and eventType are required (missing: {', '.join(fields)})",
            details={"missing": fields},
        )


class UnknownEventTypeError(RequestRejectedError):
    error_code = "UNKNOWN_EVENT_TYPE"

    def __init__(self, event_type: str, valid: list[str]) -> None:
        self.event_type = event_type
        super().__init__(
            f"Bad request: unknown eventType '{event_type}'; expected one of {', '.join(valid)}",
            details={"event_type": event_type, "valid": valid},
        )


# Dispatch errors
class TemplateRenderError(MailServiceError):
    """Raised when a notification template cannot be rendered."""
    error_code = "TEMPLATE_RENDER_FAILED"

    def __init__(self, event_type: str, reason: str) -> None:
        self.event_type = event_type
        self.reason = reason
        super().__init__(f"Failed to render template {event_type}: {reason}",
                         user_message="Failed to send email")


class DeliveryError(MailServiceError):
    """Raised when the relay rejects the message or cannot be reached."""
    error_code = "DELIVERY_FAILED"

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to deliver to {recipient}: {reason}",
                         user_message="Failed to send email")


# Startup errors
class StartupConfigurationError(MailServiceError):
    """Mandatory configuration is absent or invalid; the process must not start."""
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__(f"Invalid configuration: {'; '.join(problems)}",
                         details={"problems": problems})
