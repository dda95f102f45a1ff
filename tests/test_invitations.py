"""Invitation tests."""

from unittest.mock import patch

import pytest

from src.models.list import ListInvitation


@pytest.fixture
def list_id(client, verified_headers):
    response = client.post("/api/v1/lists", headers=verified_headers, json={"name": "Videos"})
    return response.json()["id"]


def invite(client, headers, list_id, email):
    return client.post(
        f"/api/v1/lists/{list_id}/invitations", headers=headers, json={"email": email}
    )


def test_invite_queues_email(client, verified_headers, list_id, email_tasks):
    response = invite(client, verified_headers, list_id, "Friend@Example.com")
    assert response.status_code == 201
    data = response.json()
    assert data["invited_email"] == "friend@example.com"
    assert data["invited_by_id"] == verified_headers.user_id
    assert data["status"] == "pending"
    email_tasks["invitation"].assert_called_once_with(data["id"])


def test_invite_requires_verified_email(client, auth_headers, email_tasks):
    list_id = client.post("/api/v1/lists", headers=auth_headers, json={"name": "Mine"}).json()["id"]

    response = invite(client, auth_headers, list_id, "friend@example.com")
    assert response.status_code == 403
    assert "verification" in response.json()["detail"].lower()
    email_tasks["invitation"].assert_not_called()


def test_invite_owner_only(client, other_headers, list_id, verify):
    verify(other_headers)
    response = invite(client, other_headers, list_id, "friend@example.com")
    assert response.status_code == 403


def test_invite_missing_list(client, verified_headers):
    assert invite(client, verified_headers, 99999, "friend@example.com").status_code == 404


def test_duplicate_invitation_rejected(client, db, verified_headers, list_id, email_tasks):
    invite(client, verified_headers, list_id, "friend@example.com")

    response = invite(client, verified_headers, list_id, "FRIEND@example.com")
    assert response.status_code == 409
    assert email_tasks["invitation"].call_count == 1
    assert db.query(ListInvitation).filter(ListInvitation.list_id == list_id).count() == 1



def test_concurrent_duplicate_invitation_conflicts(
    client, db, verified_headers, list_id, email_tasks
):
    """The unique constraint still yields 409 when the pre-check misses a racing insert."""
    invite(client, verified_headers, list_id, "friend@example.com")

    with patch("src.services.invitation_service.find_invitation", return_value=None):
        response = invite(client, verified_headers, list_id, "friend@example.com")

    assert response.status_code == 409
    assert email_tasks["invitation"].call_count == 1
    assert db.query(ListInvitation).filter(ListInvitation.list_id == list_id).count() == 1

def test_invite_rejects_invalid_email(client, verified_headers, list_id):
    assert invite(client, verified_headers, list_id, "not-an-email").status_code == 422


def test_invite_succeeds_when_broker_down(client, verified_headers, list_id, email_tasks):
    email_tasks["invitation"].side_effect = ConnectionError("broker unavailable")

    response = invite(client, verified_headers, list_id, "friend@example.com")
    assert response.status_code == 201


def test_list_invitations_status(client, verified_headers, list_id, make_user):
    invite(client, verified_headers, list_id, "member@example.com")
    invite(client, verified_headers, list_id, "stranger@example.com")
    make_user("member@example.com")

    response = client.get(f"/api/v1/lists/{list_id}/invitations", headers=verified_headers)
    assert response.status_code == 200
    by_email = {inv["invited_email"]: inv for inv in response.json()}
    assert by_email["member@example.com"]["invited_user_exists"] is True
    assert by_email["member@example.com"]["has_accessed"] is False
    assert by_email["stranger@example.com"]["invited_user_exists"] is False

    client.post(
        f"/api/v1/lists/{list_id}/items",
        headers=verified_headers,
        json={"video_url": "https://vimeo.com/123", "title": "Clip"},
    )
    response = client.get(f"/api/v1/lists/{list_id}/invitations", headers=verified_headers)
    by_email = {inv["invited_email"]: inv for inv in response.json()}
    assert by_email["member@example.com"]["has_accessed"] is True
    assert by_email["stranger@example.com"]["has_accessed"] is False


def test_list_invitations_owner_only(client, other_headers, list_id):
    response = client.get(f"/api/v1/lists/{list_id}/invitations", headers=other_headers)
    assert response.status_code == 403


def test_remove_invitation_revokes_access(client, verified_headers, other_headers, list_id):
    invitation_id = invite(client, verified_headers, list_id, other_headers.email).json()["id"]
    assert client.get(f"/api/v1/lists/{list_id}", headers=other_headers).status_code == 200

    response = client.delete(f"/api/v1/invitations/{invitation_id}", headers=verified_headers)
    assert response.status_code == 204
    assert client.get(f"/api/v1/lists/{list_id}", headers=other_headers).status_code == 404


def test_remove_invitation_owner_only(client, verified_headers, other_headers, list_id, verify):
    invitation_id = invite(client, verified_headers, list_id, "friend@example.com").json()["id"]
    verify(other_headers)

    response = client.delete(f"/api/v1/invitations/{invitation_id}", headers=other_headers)
    assert response.status_code == 403


def test_remove_missing_invitation(client, verified_headers):
    assert client.delete("/api/v1/invitations/99999", headers=verified_headers).status_code == 404


def test_resend_invitation(client, db, verified_headers, list_id, email_tasks):
    invitation_id = invite(client, verified_headers, list_id, "friend@example.com").json()["id"]
    invitation = db.get(ListInvitation, invitation_id)
    invitation.status = "accepted"
    db.commit()

    response = client.post(f"/api/v1/invitations/{invitation_id}/resend", headers=verified_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "pending"
    assert email_tasks["invitation"].call_count == 2
