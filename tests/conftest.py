"""
Pytest configuration and fixtures for mail service tests.
"""
import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from mail_service.config import MailServiceSettings
from mail_service.domain import (
    DeliveryResult,
    EmailChannel,
    EmailConfig,
    NotificationDispatcher,
    TemplateRegistry,
)
from mail_service.main import create_app


@pytest.fixture
def settings():
    """Create settings without reading the process .env file."""
    return MailServiceSettings(
        email="hub@example.com",
        password="app-password",
        _env_file=None,
    )


@pytest.fixture
def template_registry():
    """Create a template registry with the default templates."""
    return TemplateRegistry()


@pytest.fixture
def email_config():
    """Create email channel configuration."""
    return EmailConfig(
        smtp_host="smtp.test.com",
        smtp_port=587,
        username="hub@example.com",
        password="secret",
        from_email="hub@example.com",
        from_name="JUIT Robotics Hub",
        timeout_seconds=5.0,
    )


@pytest.fixture
def email_channel(email_config):
    """Create an SMTP email channel."""
    return EmailChannel(email_config)


@pytest.fixture
def mock_channel():
    """Create a channel double that records delivery attempts."""
    channel = AsyncMock()

    async def _send(recipient, subject, body, metadata=None):
        return DeliveryResult(recipient=recipient, message_id="OK", metadata=metadata or {})

    channel.send.side_effect = _send
    return channel


@pytest.fixture
def dispatcher(template_registry, mock_channel):
    """Create a dispatcher backed by the channel double."""
    return NotificationDispatcher(template_registry, mock_channel)


@pytest.fixture
def app(settings, dispatcher):
    """Create the application with the test dispatcher injected."""
    return create_app(settings, dispatcher=dispatcher)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)
