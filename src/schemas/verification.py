"""Email verification schemas."""

from pydantic import BaseModel, Field


class VerifyEmailRequest(BaseModel):
    """Consume a verification token."""

    token: str = Field(..., min_length=1, max_length=128)


class VerifyEmailResponse(BaseModel):
    """Result of a successful verification."""

    success: bool = True
    email: str


class VerificationStatus(BaseModel):
    """Whether an email address has been verified."""

    email: str | None
    verified: bool
