"""List access control.

Every read and write path on lists, items and invitations goes through this
module. Access is decided in a fixed order:

1. The list owner holds every capability, whatever the matrix says.
2. A caller whose account email matches an invitation for the list gets the
   ``invited`` group. Write capabilities from that group are withheld until
   the caller's email is verified; viewing is not.
3. Any other authenticated caller gets the ``users`` group, widened by the
   ``public`` group.
4. Callers without an identity get the ``public`` group.

Lists created before the matrix existed have ``permissions = NULL`` and are
evaluated against ``DEFAULT_PERMISSIONS``.
"""

import copy
from dataclasses import asdict, dataclass

from sqlalchemy.orm import Session

from src.models.email_verification import EmailVerification
from src.models.enums import Capability
from src.models.list import List, ListInvitation
from src.models.user import User

PERMISSION_GROUPS = ("public", "users", "invited")

DEFAULT_PERMISSIONS: dict[str, dict[str, bool]] = {
    "public": {"can_view": False, "can_add": False, "can_remove": False},
    "users": {"can_view": False, "can_add": False, "can_remove": False},
    "invited": {"can_view": True, "can_add": True, "can_remove": False},
}

NO_ACCESS = {"can_view": False, "can_add": False, "can_remove": False}


@dataclass(frozen=True)
class ListAccess:
    """Effective capabilities of one caller on one list."""

    can_view: bool
    can_add: bool
    can_remove: bool
    is_owner: bool = False

    def allows(self, capability: Capability) -> bool:
        """Check a single capability."""
        return getattr(self, capability.value)

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


def get_default_permissions() -> dict[str, dict[str, bool]]:
    """Fresh copy of the matrix installed on new lists."""
    return copy.deepcopy(DEFAULT_PERMISSIONS)


def get_list_permissions(list_obj: List) -> dict[str, dict[str, bool]]:
    """Return the list's matrix, falling back to the default for legacy rows."""
    stored = list_obj.permissions
    if not stored:
        return get_default_permissions()

    matrix = {}
    for group in PERMISSION_GROUPS:
        values = stored.get(group) or {}
        matrix[group] = {key: bool(values.get(key, False)) for key in NO_ACCESS}
    return matrix


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_invitation(db: Session, list_id: int, email: str | None) -> ListInvitation | None:
    """Find the invitation for an email address on a list, if any."""
    if not email:
        return None
    return (
        db.query(ListInvitation)
        .filter(
            ListInvitation.list_id == list_id,
            ListInvitation.invited_email == normalize_email(email),
        )
        .first()
    )


def is_email_verified(db: Session, email: str) -> bool:
    """Check whether a verification record for the email has been consumed."""
    verification = (
        db.query(EmailVerification)
        .filter(EmailVerification.email == normalize_email(email))
        .first()
    )
    return bool(verification and verification.verified)


def is_user_verified(db: Session, user: User | None) -> bool:
    """Check whether a user may use verification-gated features.

    Anonymous users and users without an email address are treated as
    verified, since there is nothing for them to confirm.
    """
    if user is None:
        return False
    if user.is_anonymous:
        return True
    if not user.email:
        return True
    if user.email_verification_time is not None:
        return True
    return is_email_verified(db, user.email)


def _caller_grants(db: Session, list_obj: List, user_id: int | None) -> dict[str, bool]:
    """Grants for a non-owner caller, following the invited > users > public order."""
    matrix = get_list_permissions(list_obj)

    if user_id is None:
        return dict(matrix["public"])

    user = db.get(User, user_id)
    if user is not None and find_invitation(db, list_obj.id, user.email) is not None:
        invited = matrix["invited"]
        verified = is_user_verified(db, user)
        return {
            "can_view": invited["can_view"],
            "can_add": invited["can_add"] and verified,
            "can_remove": invited["can_remove"] and verified,
        }

    return {key: matrix["users"][key] or matrix["public"][key] for key in NO_ACCESS}


def resolve_list_access(db: Session, list_obj: List, user_id: int | None) -> ListAccess:
    """Compute the full capability set of a caller on a list."""
    if user_id is not None and list_obj.owner_id == user_id:
        return ListAccess(can_view=True, can_add=True, can_remove=True, is_owner=True)

    grants = _caller_grants(db, list_obj, user_id)
    return ListAccess(
        can_view=grants["can_view"],
        can_add=grants["can_add"],
        can_remove=grants["can_remove"],
        is_owner=False,
    )


def has_permission(
    db: Session, list_obj: List, user_id: int | None, capability: Capability
) -> bool:
    """Check one capability of a caller on a list."""
    if user_id is not None and list_obj.owner_id == user_id:
        return True
    return _caller_grants(db, list_obj, user_id)[capability.value]
