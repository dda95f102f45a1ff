"""Email verification token issuance and consumption."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.email_verification import EmailVerification
from src.models.user import User
from src.services.permissions import is_email_verified, normalize_email

logger = logging.getLogger(__name__)


def generate_verification_token() -> str:
    """256 bits from the OS CSPRNG, URL-safe."""
    return secrets.token_urlsafe(32)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class VerificationService:
    """Service for confirming that users own their email addresses."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def create_verification_token(self, email: str) -> EmailVerification:
        """Issue a fresh token for an email, replacing any outstanding one.

        The verification email is queued after the record is committed.
        """
        email = normalize_email(email)
        token = generate_verification_token()
        expires_at = datetime.now(UTC) + timedelta(
            hours=self.settings.verification_token_ttl_hours
        )

        verification = (
            self.db.query(EmailVerification).filter(EmailVerification.email == email).first()
        )
        if verification:
            verification.token = token
            verification.expires_at = expires_at
            verification.verified = False
        else:
            verification = EmailVerification(
                email=email, token=token, expires_at=expires_at, verified=False
            )
            self.db.add(verification)

        self.db.commit()
        self.db.refresh(verification)

        from src.tasks.emails import queue_verification_email

        queue_verification_email(email, token)
        return verification

    def verify_email(self, token: str) -> EmailVerification:
        """Consume a token, stamping the matching user's verification time."""
        verification = (
            self.db.query(EmailVerification).filter(EmailVerification.token == token).first()
        )
        if not verification:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Invalid verification token",
            )

        now = datetime.now(UTC)
        if _as_utc(verification.expires_at) < now:
            raise HTTPException(
                status_code=status.HTTP_410_GONE,
                detail="Verification token has expired",
            )

        if verification.verified:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already verified",
            )

        verification.verified = True

        user = self.db.query(User).filter(User.email == verification.email).first()
        if user:
            user.email_verification_time = now

        self.db.commit()
        self.db.refresh(verification)
        logger.info(f"Verified email {verification.email}")
        return verification

    def is_email_verified(self, email: str) -> bool:
        return is_email_verified(self.db, email)
