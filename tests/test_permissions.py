"""Tests for the list access evaluator."""

import pytest

from src.models.enums import Capability
from src.models.list import List, ListInvitation
from src.services.permissions import (
    DEFAULT_PERMISSIONS,
    get_default_permissions,
    get_list_permissions,
    has_permission,
    resolve_list_access,
)

OPEN_MATRIX = {
    "public": {"can_view": True, "can_add": False, "can_remove": False},
    "users": {"can_view": True, "can_add": True, "can_remove": False},
    "invited": {"can_view": True, "can_add": True, "can_remove": True},
}

CLOSED_MATRIX = {
    group: {"can_view": False, "can_add": False, "can_remove": False}
    for group in ("public", "users", "invited")
}


@pytest.fixture
def owner(verified_headers):
    return verified_headers


def make_list(db, owner_id: int, permissions=None, share_token="tok") -> List:
    list_obj = List(
        name="Videos", owner_id=owner_id, share_token=share_token, permissions=permissions
    )
    db.add(list_obj)
    db.commit()
    db.refresh(list_obj)
    return list_obj


def invite(db, list_obj: List, email: str) -> None:
    db.add(
        ListInvitation(
            list_id=list_obj.id,
            invited_email=email,
            invited_by_id=list_obj.owner_id,
            status="pending",
        )
    )
    db.commit()


def test_default_permissions_is_a_copy():
    """Mutating the returned matrix must not change the default."""
    matrix = get_default_permissions()
    matrix["public"]["can_view"] = True
    assert DEFAULT_PERMISSIONS["public"]["can_view"] is False


def test_missing_matrix_uses_default(db, owner):
    """Lists without a stored matrix behave like newly created ones."""
    list_obj = make_list(db, owner.user_id, permissions=None)
    assert get_list_permissions(list_obj) == DEFAULT_PERMISSIONS


@pytest.mark.parametrize("permissions", [None, CLOSED_MATRIX, OPEN_MATRIX])
def test_owner_has_every_capability(db, owner, permissions):
    """The owner is never locked out, whatever the matrix says."""
    list_obj = make_list(db, owner.user_id, permissions=permissions)

    access = resolve_list_access(db, list_obj, owner.user_id)
    assert access.is_owner is True
    for capability in Capability:
        assert has_permission(db, list_obj, owner.user_id, capability) is True


def test_anonymous_caller_gets_public_group(db, owner):
    list_obj = make_list(db, owner.user_id, permissions=OPEN_MATRIX)

    access = resolve_list_access(db, list_obj, None)
    assert access.can_view is True
    assert access.can_add is False
    assert access.is_owner is False


def test_anonymous_caller_denied_by_default(db, owner):
    list_obj = make_list(db, owner.user_id)
    assert has_permission(db, list_obj, None, Capability.VIEW) is False


def test_signed_in_caller_gets_users_group(db, owner, other_headers):
    list_obj = make_list(db, owner.user_id, permissions=OPEN_MATRIX)

    access = resolve_list_access(db, list_obj, other_headers.user_id)
    assert access.can_view is True
    assert access.can_add is True
    assert access.can_remove is False


def test_signed_in_caller_falls_back_to_public(db, owner, other_headers):
    """A list readable by anyone stays readable after signing in."""
    matrix = {
        "public": {"can_view": True, "can_add": False, "can_remove": False},
        "users": {"can_view": False, "can_add": False, "can_remove": False},
        "invited": {"can_view": True, "can_add": True, "can_remove": False},
    }
    list_obj = make_list(db, owner.user_id, permissions=matrix)

    assert has_permission(db, list_obj, other_headers.user_id, Capability.VIEW) is True
    assert has_permission(db, list_obj, other_headers.user_id, Capability.ADD) is False


def test_invited_unverified_can_view_but_not_write(db, owner, other_headers):
    list_obj = make_list(db, owner.user_id, permissions=OPEN_MATRIX)
    invite(db, list_obj, other_headers.email)

    access = resolve_list_access(db, list_obj, other_headers.user_id)
    assert access.can_view is True
    assert access.can_add is False
    assert access.can_remove is False


def test_invited_verified_gets_invited_group(db, owner, other_headers, verify):
    list_obj = make_list(db, owner.user_id, permissions=OPEN_MATRIX)
    invite(db, list_obj, other_headers.email)
    verify(other_headers)

    access = resolve_list_access(db, list_obj, other_headers.user_id)
    assert access.can_view is True
    assert access.can_add is True
    assert access.can_remove is True


def test_invitation_takes_precedence_over_users_group(db, owner, other_headers, verify):
    """An invited caller is judged by the invited group only."""
    matrix = {
        "public": {"can_view": False, "can_add": False, "can_remove": False},
        "users": {"can_view": True, "can_add": True, "can_remove": True},
        "invited": {"can_view": True, "can_add": False, "can_remove": False},
    }
    list_obj = make_list(db, owner.user_id, permissions=matrix)
    invite(db, list_obj, other_headers.email)
    verify(other_headers)

    assert has_permission(db, list_obj, other_headers.user_id, Capability.ADD) is False


def test_invitation_matches_case_insensitively(db, owner, make_user, verify):
    caller = make_user("Carol@Example.com")
    verify(caller)
    list_obj = make_list(db, owner.user_id)
    invite(db, list_obj, "carol@example.com")

    assert has_permission(db, list_obj, caller.user_id, Capability.ADD) is True


@pytest.mark.parametrize("permissions", [None, CLOSED_MATRIX, OPEN_MATRIX])
def test_has_permission_agrees_with_resolved_access(
    db, owner, other_headers, anonymous_headers, permissions
):
    list_obj = make_list(db, owner.user_id, permissions=permissions)
    invite(db, list_obj, other_headers.email)

    for user_id in (None, owner.user_id, other_headers.user_id, anonymous_headers.user_id):
        access = resolve_list_access(db, list_obj, user_id)
        for capability in Capability:
            assert has_permission(db, list_obj, user_id, capability) == access.allows(capability)


def test_my_permissions_endpoint(client, verified_headers, other_headers):
    list_id = client.post(
        "/api/v1/lists", headers=verified_headers, json={"name": "Mine"}
    ).json()["id"]

    response = client.get(f"/api/v1/lists/{list_id}/permissions", headers=verified_headers)
    assert response.status_code == 200
    assert response.json() == {
        "can_view": True,
        "can_add": True,
        "can_remove": True,
        "is_owner": True,
    }

    response = client.get(f"/api/v1/lists/{list_id}/permissions", headers=other_headers)
    assert response.status_code == 200
    assert response.json()["can_view"] is False
