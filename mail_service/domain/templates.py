"""
Mail Service - Template Management.

Notification template definitions and rendering engine using Jinja2.
One plain-text template per event type; the registry refuses to start if an
event type has no template.

Architecture Layer: Domain
Principles: Template Method Pattern, Registry Pattern, Immutability
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError
from pydantic import BaseModel, Field, field_validator
import structlog

from ..exceptions import TemplateRenderError
from .entities import EventType, NotificationRequest

logger = structlog.get_logger(__name__)

SIGNATURE = "\n\nBest regards,\nThe JUIT Robotics Hub Team"
PROJECT_REF = "{% if project_name %} \"{{ project_name }}\"{% endif %}"
SUBJECT_SUFFIX = "{% if project_name %} - {{ project_name }}{% endif %}"
COMMENTS_BLOCK = "{% if comments %}\n\nAdmin Comments:\n{{ comments }}{% endif %}"


class NotificationTemplate(BaseModel):
    """
    Notification template definition.

    Templates use Jinja2 syntax for variable interpolation.
    """
    event_type: EventType = Field(..., description="Event this template renders")
    name: str = Field(..., min_length=1, max_length=100, description="Template name")

    subject_template: str = Field(..., min_length=1, description="Subject line template (Jinja2)")
    body_template: str = Field(..., min_length=1, description="Plain text body template (Jinja2)")

    required_variables: list[str] = Field(default_factory=list)
    default_values: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("required_variables", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        return list(v) if isinstance(v, (list, tuple, set)) else [v]


class RenderedTemplate(BaseModel):
    """Result of template rendering."""
    event_type: EventType
    subject: str
    body: str
    rendered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TemplateEngine:
    """
    Jinja2-based template rendering engine.

    Bodies are plain text, so autoescaping is off; undefined variables fail loudly.
    """
    def __init__(self) -> None:
        self._env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            undefined=StrictUndefined,
        )

    def render(
        self,
        template: NotificationTemplate,
        variables: dict[str, Any],
    ) -> RenderedTemplate:
        """
        Render a template with provided variables.

        Raises:
            TemplateRenderError: If rendering fails or required variables are missing
        """
        merged_vars = {**template.default_values, **variables}
        missing = [v for v in template.required_variables if not merged_vars.get(v)]
        if missing:
            logger.warning("template_missing_variables",
                           event_type=template.event_type.value, missing=missing)
            raise TemplateRenderError(template.event_type.value, f"Missing required variables: {missing}")

        try:
            subject = self._env.from_string(template.subject_template).render(**merged_vars)
            body = self._env.from_string(template.body_template).render(**merged_vars)
        except TemplateError as e:
            logger.error("template_render_failed",
                         event_type=template.event_type.value, error=str(e))
            raise TemplateRenderError(template.event_type.value, str(e)) from e

        logger.debug("template_rendered", template=template.name,
                     event_type=template.event_type.value)
        return RenderedTemplate(event_type=template.event_type, subject=subject, body=body)


def default_templates() -> list[NotificationTemplate]:
    """Built-in templates, one per event type."""
    shared = {
        "required_variables": ["name"],
        "default_values": {"project_name": "", "comments": ""},
    }
    return [
        NotificationTemplate(
            event_type=EventType.SUBMISSION,
            name="Project Submission",
            subject_template="Project Submission Confirmation" + SUBJECT_SUFFIX,
            body_template=(
                "Hi {{ name }},\n\nThank you for submitting your project idea" + PROJECT_REF
                + " to the JUIT Robotics Hub. We have received it and will review it shortly."
                + SIGNATURE
            ),
            **shared,
        ),
        NotificationTemplate(
            event_type=EventType.APPROVED,
            name="Project Approved",
            subject_template="Project Approved" + SUBJECT_SUFFIX,
            body_template=(
                "Hi {{ name }},\n\nCongratulations! Your project" + PROJECT_REF
                + " has been approved by the JUIT Robotics Hub. Our team will reach out"
                " shortly with the next steps." + COMMENTS_BLOCK + SIGNATURE
            ),
            **shared,
        ),
        NotificationTemplate(
            event_type=EventType.REJECTED,
            name="Project Rejected",
            subject_template="Project Review Update" + SUBJECT_SUFFIX,
            body_template=(
                "Hi {{ name }},\n\nThank you for submitting your project" + PROJECT_REF
                + " to the JUIT Robotics Hub. After careful review, we regret to inform you"
                " that it has been declined at this time. We encourage you to refine your"
                " idea and submit again." + COMMENTS_BLOCK + SIGNATURE
            ),
            **shared,
        ),
    ]


class TemplateRegistry:
    """
    Registry of notification templates keyed by event type.

    Construction fails if any EventType member lacks a template.
    """
    def __init__(self, templates: list[NotificationTemplate] | None = None) -> None:
        self._templates: dict[EventType, NotificationTemplate] = {
            t.event_type: t for t in (templates if templates is not None else default_templates())
        }
        self._engine = TemplateEngine()
        uncovered = [e.value for e in EventType if e not in self._templates]
        if uncovered:
            raise ValueError(f"No template registered for event types: {uncovered}")
        logger.info("template_registry_initialized", template_count=len(self._templates))

    def get_template(self, event_type: EventType) -> NotificationTemplate:
        """Get the template for an event type."""
        return self._templates[event_type]

    def render_template(
        self,
        event_type: EventType,
        variables: dict[str, Any],
    ) -> RenderedTemplate:
        """Render the template for an event type with variables."""
        return self._engine.render(self.get_template(event_type), variables)

    def render_request(self, request: NotificationRequest) -> RenderedTemplate:
        """Render the subject/body pair for a notification request."""
        return self.render_template(request.event_type, request.template_variables())
