"""
Mail Service - Domain Entities.

Closed set of notification event types and the transient notification request.

Architecture Layer: Domain
Principles: Immutable Value Objects, Closed Enumerations
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class EventType(str, Enum):
    """Project lifecycle events that trigger an email."""
    SUBMISSION = "submission"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class NotificationRequest(BaseModel):
    """
    A single notification to dispatch.

    Exists only for the duration of one request. The recipient address is not
    checked for RFC correctness; the relay is the authority on deliverability.
    """
    email: str = Field(..., min_length=1, description="Recipient address")
    name: str = Field(..., min_length=1, description="Recipient display name")
    event_type: EventType = Field(..., description="Event driving template selection")
    project_name: str = Field(default="", description="Project referenced in the email")
    comments: str = Field(default="", description="Reviewer comments, included when non-empty")

    model_config = {"frozen": True}

    @field_validator("email", "name", "project_name", "comments", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @property
    def has_comments(self) -> bool:
        return bool(self.comments)

    def template_variables(self) -> dict[str, Any]:
        """Variables exposed to the notification templates."""
        return {
            "name": self.name,
            "project_name": self.project_name,
            "comments": self.comments,
        }
