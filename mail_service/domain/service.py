"""
Mail Service - Notification Dispatch.

Core service that turns a validated notification request into exactly one
email submission: select and render the template, then deliver it.

Architecture Layer: Domain
Principles: Facade Pattern, Explicit Dependencies
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import BaseModel, Field
import structlog

from ..config import MailServiceSettings
from .channels import DeliveryResult, EmailChannel, EmailConfig
from .entities import EventType, NotificationRequest
from .templates import RenderedTemplate, TemplateRegistry

logger = structlog.get_logger(__name__)


class MailChannel(Protocol):
    """Anything able to submit a single email."""
    async def send(self, recipient: str, subject: str, body: str,
                   metadata: dict | None = None) -> DeliveryResult: ...


class DispatchResult(BaseModel):
    """Outcome of a successful dispatch."""
    dispatch_id: UUID = Field(default_factory=uuid4)
    event_type: EventType
    recipient: str
    subject: str
    delivery: DeliveryResult
    processing_time_ms: float = 0.0

    @property
    def message(self) -> str:
        return f"{self.event_type.value} email sent successfully"


class NotificationDispatcher:
    """
    Renders notification templates and relays them through the email channel.

    There is no deduplication and no retry: each call is one delivery attempt.
    """
    def __init__(self, templates: TemplateRegistry, channel: MailChannel) -> None:
        self._templates = templates
        self._channel = channel
        logger.info("notification_dispatcher_initialized")

    def render(self, request: NotificationRequest) -> RenderedTemplate:
        """Select and render the subject/body pair for a request."""
        return self._templates.render_request(request)

    async def dispatch(self, request: NotificationRequest) -> DispatchResult:
        """
        Render and deliver a notification.

        Raises:
            TemplateRenderError: If the template cannot be rendered
            DeliveryError: If the relay rejects the message or is unreachable
        """
        start_time = datetime.now(timezone.utc)
        dispatch_id = uuid4()
        log = logger.bind(dispatch_id=str(dispatch_id), event_type=request.event_type.value)
        log.info("notification_dispatch_started", recipient=request.email)

        rendered = self.render(request)
        delivery = await self._channel.send(
            recipient=request.email,
            subject=rendered.subject,
            body=rendered.body,
            metadata={"dispatch_id": str(dispatch_id), "event_type": request.event_type.value},
        )

        processing_time = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        log.info("notification_dispatched", recipient=request.email,
                 processing_time_ms=round(processing_time, 2))
        return DispatchResult(
            dispatch_id=dispatch_id,
            event_type=request.event_type,
            recipient=request.email,
            subject=rendered.subject,
            delivery=delivery,
            processing_time_ms=processing_time,
        )


def email_config_from_settings(settings: MailServiceSettings) -> EmailConfig:
    """Map process settings onto the channel's relay configuration."""
    return EmailConfig(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        username=settings.email,
        password=settings.password,
        from_email=settings.email,
        from_name=settings.sender_name,
        timeout_seconds=settings.smtp_timeout_seconds,
    )


def create_dispatcher(settings: MailServiceSettings) -> NotificationDispatcher:
    """Factory wiring the default templates and an SMTP channel from settings."""
    return NotificationDispatcher(
        templates=TemplateRegistry(),
        channel=EmailChannel(email_config_from_settings(settings)),
    )
