"""
Mail Service - REST API Endpoints.

FastAPI router for notification dispatch. Validation runs in a fixed order
(shape, required fields, event type) and short-circuits before any email is sent.

Architecture Layer: Interface/Adapter
Principles: REST, Input Validation, Structured Responses
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import AliasChoices, BaseModel, Field
import structlog

from .domain import EventType, NotificationDispatcher, NotificationRequest
from .exceptions import MissingFieldError, UnknownEventTypeError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])

REQUIRED_FIELDS = ("email", "name", "eventType")


class SendEmailRequest(BaseModel):
    """API request to send a notification email."""
    email: str | None = Field(default=None, description="Recipient email address")
    name: str | None = Field(default=None, description="Recipient display name")
    event_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("eventType", "emailType"),
        description="One of submission, approved, rejected",
    )
    project_name: str | None = Field(default=None, validation_alias="projectName")
    comments: str | None = Field(default=None, description="Reviewer comments")

    model_config = {"json_schema_extra": {
        "example": {
            "email": "ann@example.com",
            "name": "Ann",
            "eventType": "approved",
            "projectName": "RoboArm",
            "comments": "Great work",
        }
    }}


class SendEmailResponse(BaseModel):
    """Acknowledgment naming the event type processed."""
    message: str


def _get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dependency to get the dispatcher wired at application startup."""
    return request.app.state.dispatcher


def _missing_fields(request: SendEmailRequest) -> list[str]:
    values = {"email": request.email, "name": request.name, "eventType": request.event_type}
    return [f for f in REQUIRED_FIELDS if not (values[f] or "").strip()]


def _parse_event_type(event_type: str) -> EventType:
    """Parse and validate the event type string."""
    try:
        return EventType(event_type.strip())
    except ValueError:
        raise UnknownEventTypeError(event_type, EventType.values())


def _to_notification(request: SendEmailRequest) -> NotificationRequest:
    missing = _missing_fields(request)
    if missing:
        raise MissingFieldError(missing)
    event_type = _parse_event_type(request.event_type or "")
    return NotificationRequest(
        email=request.email,
        name=request.name,
        event_type=event_type,
        project_name=request.project_name or "",
        comments=request.comments or "",
    )


@router.post("/send-email", response_model=SendEmailResponse)
async def send_email(
    request: SendEmailRequest,
    dispatcher: NotificationDispatcher = Depends(_get_dispatcher),
) -> SendEmailResponse:
    """Render the template for the event type and send it to the recipient."""
    notification = _to_notification(request)
    logger.info("api_send_email", to=notification.email, event_type=notification.event_type.value)

    result = await dispatcher.dispatch(notification)
    return SendEmailResponse(message=result.message)


@router.options("/send-email", include_in_schema=False)
async def send_email_preflight() -> Response:
    """Acknowledge a pre-flight probe with an empty body."""
    return Response(status_code=status.HTTP_200_OK)
