"""
Unit tests for notification templates module.
"""
import pytest

from mail_service.domain.entities import EventType, NotificationRequest
from mail_service.domain.templates import (
    NotificationTemplate,
    RenderedTemplate,
    TemplateEngine,
    TemplateRegistry,
    default_templates,
)
from mail_service.exceptions import TemplateRenderError


def _request(event_type, **overrides):
    data = {"email": "a@b.com", "name": "Ann", "event_type": event_type, "project_name": "RoboArm"}
    data.update(overrides)
    return NotificationRequest(**data)


class TestTemplateEngine:
    """Tests for TemplateEngine."""

    @pytest.fixture
    def engine(self):
        return TemplateEngine()

    @pytest.fixture
    def simple_template(self):
        return NotificationTemplate(
            event_type=EventType.SUBMISSION,
            name="Simple Template",
            subject_template="Hello {{ name }}",
            body_template="Welcome to {{ service }}, {{ name }}!",
            required_variables=["name", "service"],
        )

    def test_render_template_success(self, engine, simple_template):
        """Test successful template rendering."""
        result = engine.render(simple_template, {"name": "Ann", "service": "the Hub"})
        assert isinstance(result, RenderedTemplate)
        assert result.subject == "Hello Ann"
        assert result.body == "Welcome to the Hub, Ann!"

    def test_render_missing_required_variable(self, engine, simple_template):
        """Test missing required variables raise TemplateRenderError."""
        with pytest.raises(TemplateRenderError) as exc_info:
            engine.render(simple_template, {"name": "Ann"})
        assert "service" in str(exc_info.value)

    def test_render_undefined_variable(self, engine):
        """Test undefined variables fail instead of rendering blank."""
        template = NotificationTemplate(
            event_type=EventType.SUBMISSION,
            name="Strict",
            subject_template="Hi",
            body_template="{{ not_provided }}",
        )
        with pytest.raises(TemplateRenderError):
            engine.render(template, {})

    def test_plain_text_not_escaped(self, engine):
        """Test bodies are rendered as plain text without HTML escaping."""
        template = NotificationTemplate(
            event_type=EventType.APPROVED,
            name="Plain",
            subject_template="S",
            body_template="{{ comments }}",
        )
        result = engine.render(template, {"comments": "R&D <team>"})
        assert result.body == "R&D <team>"


class TestTemplateRegistry:
    """Tests for TemplateRegistry."""

    @pytest.fixture
    def registry(self):
        return TemplateRegistry()

    def test_every_event_type_has_template(self, registry):
        """Test the default registry covers the closed event set."""
        for event_type in EventType:
            assert registry.get_template(event_type).event_type == event_type

    def test_incomplete_registry_rejected(self):
        """Test a registry missing an event type cannot be constructed."""
        partial = [t for t in default_templates() if t.event_type != EventType.REJECTED]
        with pytest.raises(ValueError, match="rejected"):
            TemplateRegistry(partial)

    def test_submission_template(self, registry):
        """Test submission confirmation content."""
        rendered = registry.render_request(_request(EventType.SUBMISSION))

        assert "Project Submission Confirmation" in rendered.subject
        assert rendered.body.startswith("Hi Ann,")
        assert '"RoboArm"' in rendered.body
        assert "Admin Comments" not in rendered.body

    def test_submission_without_project_name(self, registry):
        """Test project name is optional."""
        rendered = registry.render_request(_request(EventType.SUBMISSION, project_name=""))

        assert rendered.subject == "Project Submission Confirmation"
        assert '""' not in rendered.body

    def test_approved_with_comments(self, registry):
        """Test approval appends the comments block."""
        rendered = registry.render_request(_request(EventType.APPROVED, comments="Great work"))

        assert "approved" in rendered.body
        assert "Congratulations" in rendered.body
        assert "Admin Comments:\nGreat work" in rendered.body

    def test_approved_without_comments(self, registry):
        """Test the comments block is absent when comments are empty."""
        rendered = registry.render_request(_request(EventType.APPROVED))

        assert "approved" in rendered.body
        assert "Admin Comments" not in rendered.body

    def test_rejected_with_comments(self, registry):
        """Test rejection appends the comments block."""
        rendered = registry.render_request(_request(EventType.REJECTED, comments="Needs a budget"))

        assert "declined" in rendered.body
        assert "RoboArm" in rendered.body
        assert "Admin Comments:\nNeeds a budget" in rendered.body

    def test_rejected_whitespace_comments_omitted(self, registry):
        """Test whitespace-only comments count as empty."""
        rendered = registry.render_request(_request(EventType.REJECTED, comments="   "))

        assert "Admin Comments" not in rendered.body

    def test_rendering_is_deterministic(self, registry):
        """Test rendering depends only on the request fields."""
        request = _request(EventType.APPROVED, comments="Nice")
        first = registry.render_request(request)
        second = registry.render_request(request)

        assert (first.subject, first.body) == (second.subject, second.body)
