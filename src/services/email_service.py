"""Transactional email rendering and delivery through the Resend API."""

import html
import logging

import httpx
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.list import ListInvitation
from src.services.permissions import get_list_permissions

logger = logging.getLogger(__name__)

_WRAPPER = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; '
    'padding: 20px;">{body}</div>'
)
_BUTTON = (
    '<a href="{url}" style="background-color: #007bff; color: white; padding: 12px 24px; '
    'text-decoration: none; border-radius: 6px; display: inline-block; font-weight: bold;">'
    "{label}</a>"
)


def render_invitation_email(
    list_name: str,
    inviter_name: str,
    share_url: str,
    grants: dict[str, bool],
) -> tuple[str, str]:
    """Return (subject, html) for a list invitation."""
    abilities = []
    if grants.get("can_view"):
        abilities.append("<li>View all videos in the list</li>")
    if grants.get("can_add"):
        abilities.append("<li>Add new videos to the list</li>")
    if grants.get("can_remove"):
        abilities.append("<li>Edit and remove videos from the list</li>")

    safe_name = html.escape(list_name)
    body = (
        '<h1 style="color: #333; text-align: center;">You\'ve been invited to a video list!</h1>'
        f"<h2>{safe_name}</h2>"
        f"<p>{html.escape(inviter_name)} has invited you to collaborate on their video list.</p>"
        f'<p style="text-align: center;">{_BUTTON.format(url=share_url, label="View List")}</p>'
        f"<h3>What you can do:</h3><ul>{''.join(abilities)}</ul>"
        '<p style="color: #6c757d; font-size: 14px;">'
        "If you don't want to receive these invitations, you can ignore this email.</p>"
    )
    subject = f'You\'ve been invited to "{list_name}" video list'
    return subject, _WRAPPER.format(body=body)


def render_verification_email(verification_url: str, ttl_hours: int) -> tuple[str, str]:
    """Return (subject, html) for an email address confirmation."""
    body = (
        '<h1 style="color: #333; text-align: center;">Verify Your Email Address</h1>'
        "<p>Welcome to VideoList Curator! Please verify your email address to complete "
        "your account setup.</p>"
        f'<p style="text-align: center;">'
        f'{_BUTTON.format(url=verification_url, label="Verify Email Address")}</p>'
        '<p style="color: #6c757d; font-size: 12px; text-align: center;">'
        f"This verification link will expire in {ttl_hours} hours.</p>"
    )
    return "Verify your email address - VideoList Curator", _WRAPPER.format(body=body)


class EmailService:
    """Service for sending transactional email."""

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = get_settings()
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.resend_api_key)

    def send(self, to: str, subject: str, html_body: str) -> bool:
        """Send one email. Returns True when the provider accepted it."""
        if not self.is_configured:
            logger.warning(f"Resend API key not configured, not sending '{subject}' to {to}")
            return False

        payload = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": subject,
            "html": html_body,
        }
        try:
            with httpx.Client(
                timeout=self.settings.http_timeout_seconds, transport=self._transport
            ) as client:
                response = client.post(
                    self.settings.resend_api_url,
                    headers={"Authorization": f"Bearer {self.settings.resend_api_key}"},
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Resend rejected email to {to}: {e.response.status_code} {e.response.text}"
            )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Resend for email to {to}: {e}")
            return False

        logger.info(f"Sent '{subject}' to {to}")
        return True

    def send_invitation(self, db: Session, invitation_id: int) -> bool:
        """Render and send the email for an invitation."""
        invitation = db.get(ListInvitation, invitation_id)
        if invitation is None or invitation.list is None or invitation.invited_by is None:
            logger.warning(f"Invitation {invitation_id} no longer exists, skipping email")
            return False

        list_obj = invitation.list
        inviter = invitation.invited_by
        inviter_name = inviter.name or inviter.email or "Someone"
        share_url = f"{self.settings.app_base_url.rstrip('/')}/shared/{list_obj.share_token}"
        grants = get_list_permissions(list_obj)["invited"]

        subject, html_body = render_invitation_email(
            list_obj.name, inviter_name, share_url, grants
        )
        return self.send(invitation.invited_email, subject, html_body)

    def send_verification(self, email: str, token: str) -> bool:
        """Render and send the email address confirmation link."""
        verification_url = (
            f"{self.settings.app_base_url.rstrip('/')}/verify-email?token={token}"
        )
        subject, html_body = render_verification_email(
            verification_url, self.settings.verification_token_ttl_hours
        )
        return self.send(email, subject, html_body)
