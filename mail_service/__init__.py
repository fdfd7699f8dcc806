"""
JUIT Robotics Hub Mail Service.

Notification dispatch service that renders project lifecycle emails
(submission, approval, rejection) and relays them over authenticated SMTP.

Architecture:
    - Domain Layer: Event types, templates, SMTP channel, dispatch orchestration
    - Interface Layer: REST API endpoints
    - Infrastructure Layer: Settings, logging, process entry point

Usage:
    from mail_service.config import load_settings
    from mail_service.main import create_app

    app = create_app(load_settings())
"""
__version__ = "1.0.0"
