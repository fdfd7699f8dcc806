"""
Mail Service - Domain Layer.

Event types, templates, SMTP channel, and dispatch orchestration.
"""
from .entities import EventType, NotificationRequest
from .templates import (
    NotificationTemplate,
    RenderedTemplate,
    TemplateEngine,
    TemplateRegistry,
    default_templates,
)
from .channels import DeliveryResult, EmailChannel, EmailConfig
from .service import (
    DispatchResult,
    MailChannel,
    NotificationDispatcher,
    create_dispatcher,
    email_config_from_settings,
)

__all__ = [
    # Entities
    "EventType",
    "NotificationRequest",
    # Templates
    "NotificationTemplate",
    "RenderedTemplate",
    "TemplateEngine",
    "TemplateRegistry",
    "default_templates",
    # Channels
    "DeliveryResult",
    "EmailChannel",
    "EmailConfig",
    # Service
    "DispatchResult",
    "MailChannel",
    "NotificationDispatcher",
    "create_dispatcher",
    "email_config_from_settings",
]
