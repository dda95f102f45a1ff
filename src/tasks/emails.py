"""Celery tasks for invitation and verification emails.

Mutations never wait on these. They call the ``queue_*`` helpers, which hand
the message to the broker and return; a broker outage is logged and the
mutation still succeeds.
"""

import logging

from sqlalchemy.orm import Session

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.services.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task
def send_invitation_email(invitation_id: int) -> dict:
    """Send the email for a newly created or resent invitation.

    Args:
        invitation_id: ID of the invitation to announce

    Returns:
        dict with the delivery outcome
    """
    db: Session = SessionLocal()
    try:
        sent = EmailService().send_invitation(db, invitation_id)
        return {"success": sent, "invitation_id": invitation_id}
    except Exception as e:
        logger.error(f"Error sending invitation email {invitation_id}: {e}", exc_info=True)
        return {"success": False, "invitation_id": invitation_id, "error": str(e)}
    finally:
        db.close()


@celery_app.task
def send_verification_email(email: str, token: str) -> dict:
    """Send the email address confirmation link.

    Args:
        email: Address to confirm
        token: Verification token embedded in the link

    Returns:
        dict with the delivery outcome
    """
    try:
        sent = EmailService().send_verification(email, token)
        return {"success": sent, "email": email}
    except Exception as e:
        logger.error(f"Error sending verification email to {email}: {e}", exc_info=True)
        return {"success": False, "email": email, "error": str(e)}


def queue_invitation_email(invitation_id: int) -> bool:
    """Enqueue an invitation email without blocking the caller."""
    try:
        send_invitation_email.delay(invitation_id)
        logger.info(f"Queued invitation email for invitation {invitation_id}")
        return True
    except Exception as e:
        # Don't fail the request if the broker is unavailable
        logger.error(f"Failed to queue invitation email {invitation_id}: {e}")
        return False


def queue_verification_email(email: str, token: str) -> bool:
    """Enqueue a verification email without blocking the caller."""
    try:
        send_verification_email.delay(email, token)
        logger.info(f"Queued verification email for {email}")
        return True
    except Exception as e:
        logger.error(f"Failed to queue verification email for {email}: {e}")
        return False
