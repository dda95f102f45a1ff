"""Tests for email rendering, delivery and task dispatch."""

import json
from unittest.mock import patch

import httpx

from src.services.email_service import (
    EmailService,
    render_invitation_email,
    render_verification_email,
)
from src.tasks.emails import (
    queue_invitation_email,
    queue_verification_email,
    send_invitation_email,
    send_verification_email,
)


def make_service(handler, **settings) -> EmailService:
    service = EmailService(transport=httpx.MockTransport(handler))
    service.settings = service.settings.model_copy(update=settings)
    return service


def test_render_invitation_lists_grants_and_escapes_name():
    subject, html_body = render_invitation_email(
        "<Best> clips",
        "Alice",
        "http://app/shared/tok",
        {"can_view": True, "can_add": True, "can_remove": False},
    )
    assert "<Best> clips" in subject
    assert "&lt;Best&gt; clips" in html_body
    assert "Add new videos" in html_body
    assert "Edit and remove" not in html_body
    assert "http://app/shared/tok" in html_body


def test_render_verification_mentions_expiry():
    _, html_body = render_verification_email("http://app/verify-email?token=abc", 24)
    assert "token=abc" in html_body
    assert "24 hours" in html_body


def test_send_posts_to_resend():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["auth"] = request.headers["Authorization"]
        captured["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email-1"})

    service = make_service(handler, resend_api_key="re_test")
    assert service.send("friend@example.com", "Hello", "<p>Hi</p>") is True
    assert captured["auth"] == "Bearer re_test"
    assert captured["payload"]["to"] == ["friend@example.com"]
    assert captured["payload"]["subject"] == "Hello"


def test_send_reports_provider_rejection():
    service = make_service(lambda request: httpx.Response(422), resend_api_key="re_test")
    assert service.send("friend@example.com", "Hello", "<p>Hi</p>") is False


def test_send_skipped_without_api_key():
    def handler(request):
        raise AssertionError("no request expected")

    service = make_service(handler, resend_api_key=None)
    assert service.send("friend@example.com", "Hello", "<p>Hi</p>") is False


def test_send_invitation_for_missing_invitation(db):
    service = make_service(lambda request: httpx.Response(200), resend_api_key="re_test")
    assert service.send_invitation(db, 99999) is False


def test_verification_link_uses_app_base_url():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["payload"] = json.loads(request.content)
        return httpx.Response(200)

    service = make_service(
        handler, resend_api_key="re_test", app_base_url="https://videos.example.com/"
    )
    assert service.send_verification("me@example.com", "tok123") is True
    assert "https://videos.example.com/verify-email?token=tok123" in captured["payload"]["html"]


def test_queue_helpers_report_dispatch(email_tasks):
    assert queue_invitation_email(5) is True
    email_tasks["invitation"].assert_called_once_with(5)
    assert queue_verification_email("me@example.com", "tok") is True
    email_tasks["verification"].assert_called_once_with("me@example.com", "tok")


def test_queue_helpers_swallow_broker_errors(email_tasks):
    email_tasks["invitation"].side_effect = ConnectionError("redis down")
    email_tasks["verification"].side_effect = ConnectionError("redis down")

    assert queue_invitation_email(5) is False
    assert queue_verification_email("me@example.com", "tok") is False


def test_verification_task_reports_failure():
    with patch(
        "src.tasks.emails.EmailService.send_verification", side_effect=RuntimeError("boom")
    ):
        result = send_verification_email("me@example.com", "tok")

    assert result == {"success": False, "email": "me@example.com", "error": "boom"}


def test_invitation_task_returns_outcome():
    with patch("src.tasks.emails.EmailService.send_invitation", return_value=True):
        result = send_invitation_email(7)

    assert result == {"success": True, "invitation_id": 7}
