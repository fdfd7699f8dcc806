"""
Mail Service - Email Channel.

SMTP delivery to a single upstream relay over an authenticated STARTTLS session.
Each call is one submission attempt; failures surface as DeliveryError.

Architecture Layer: Domain/Infrastructure
Principles: Dependency Inversion, Async I/O
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from email.header import Header
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Any
from uuid import UUID, uuid4

import aiosmtplib
from pydantic import BaseModel, Field, SecretStr
import structlog

from ..exceptions import DeliveryError

logger = structlog.get_logger(__name__)

# Newlines and control characters that would allow header injection
_HEADER_INJECTION_PATTERN = re.compile(r'[\r\n\x00\x0b\x0c]')


def _sanitize_header(value: str, max_length: int = 998) -> str:
    """
    Sanitize a string for safe use in email headers.

    Args:
        value: The header value to sanitize.
        max_length: Maximum length for the header value (RFC 5322 recommends 998).

    Returns:
        Sanitized string safe for use in email headers.
    """
    if not value:
        return ""
    sanitized = _HEADER_INJECTION_PATTERN.sub('', value)
    return sanitized[:max_length].strip()


class EmailConfig(BaseModel):
    """Relay connection and sender identity."""
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587, ge=1, le=65535)
    username: str = Field(..., min_length=1)
    password: SecretStr
    start_tls: bool = Field(default=True)
    from_email: str = Field(..., min_length=1)
    from_name: str = Field(default="")
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)

    model_config = {"frozen": True}


class DeliveryResult(BaseModel):
    """Result of an accepted delivery."""
    delivery_id: UUID = Field(default_factory=uuid4)
    recipient: str
    message_id: str | None = None
    delivered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = Field(default_factory=dict)


class EmailChannel:
    """Email notification channel using SMTP submission."""
    def __init__(self, config: EmailConfig) -> None:
        self._config = config

    def build_message(self, recipient: str, subject: str, body: str) -> MIMEText:
        """Build a plain-text message with sanitized headers."""
        message = MIMEText(body, "plain", "utf-8")
        message["Subject"] = Header(_sanitize_header(subject, max_length=200), "utf-8")
        message["From"] = formataddr((
            _sanitize_header(self._config.from_name, max_length=100),
            _sanitize_header(self._config.from_email),
        ))
        message["To"] = _sanitize_header(recipient)
        return message

    async def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> DeliveryResult:
        """
        Submit one message to the relay, addressed to a single recipient.

        Args:
            recipient: Target email address
            subject: Subject line
            body: Plain text body
            metadata: Optional delivery metadata echoed in the result

        Returns:
            DeliveryResult once the relay accepts the message

        Raises:
            DeliveryError: If the relay is unreachable, authentication fails, or the message is rejected
        """
        message = self.build_message(recipient, subject, body)
        try:
            async with aiosmtplib.SMTP(
                hostname=self._config.smtp_host,
                port=self._config.smtp_port,
                start_tls=self._config.start_tls,
                timeout=self._config.timeout_seconds,
            ) as smtp:
                await smtp.login(self._config.username, self._config.password.get_secret_value())
                # Single RCPT taken from the request, never from the To header
                response = await smtp.send_message(message, recipients=[recipient])
        except Exception as e:
            logger.error("email_delivery_failed", recipient=recipient,
                         smtp_host=self._config.smtp_host, error=str(e),
                         error_type=type(e).__name__)
            raise DeliveryError(recipient, str(e)) from e

        message_id = response[1] if response else None
        result = DeliveryResult(
            recipient=recipient,
            message_id=str(message_id) if message_id else None,
            metadata=metadata or {},
        )
        logger.info("email_delivered", delivery_id=str(result.delivery_id), recipient=recipient,
                    smtp_host=self._config.smtp_host)
        return result
