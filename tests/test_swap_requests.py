"""Swap request lifecycle and authorization tests."""

from __future__ import annotations

import pytest


@pytest.fixture()
def pending_request_id(client_for) -> int:
    """Carol's seeded pending request for alice's Guitar skill."""

    carol = client_for("carol")
    requests = carol.get("/api/swap-requests/user").get_json()
    return next(item["request"]["id"] for item in requests if item["request"]["status"] == "pending")


def _create(client, offered: int, requested: int, **extra):
    return client.post(
        "/api/swap-requests",
        json={"offeredSkillId": offered, "requestedSkillId": requested, **extra},
    )


def test_create_defaults_to_pending(client_for, skill_ids, user_ids):
    alice = client_for("alice")
    response = _create(
        alice,
        skill_ids[("alice", "Guitar")],
        skill_ids[("bob", "Excel")],
        message="Guitar for Excel?",
        preferredTimes=["saturday morning"],
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["status"] == "pending"
    assert body["requesterId"] == user_ids["alice"]
    assert body["providerId"] == user_ids["bob"]
    assert body["preferredTimes"] == ["saturday morning"]


def test_create_validates_skill_ownership(client_for, skill_ids, user_ids):
    alice = client_for("alice")

    not_mine = _create(alice, skill_ids[("carol", "Photography")], skill_ids[("bob", "Excel")])
    assert not_mine.status_code == 400
    assert "offeredSkillId" in not_mine.get_json()["errors"]

    own_skill = _create(alice, skill_ids[("alice", "Guitar")], skill_ids[("alice", "Spanish")])
    assert own_skill.status_code == 400
    assert "requestedSkillId" in own_skill.get_json()["errors"]

    wrong_provider = _create(
        alice,
        skill_ids[("alice", "Guitar")],
        skill_ids[("bob", "Excel")],
        providerId=user_ids["carol"],
    )
    assert wrong_provider.status_code == 400
    assert "providerId" in wrong_provider.get_json()["errors"]

    missing = _create(alice, skill_ids[("alice", "Guitar")], 9999)
    assert missing.status_code == 400

    no_body = alice.post("/api/swap-requests", json={})
    assert no_body.status_code == 400
    assert set(no_body.get_json()["errors"]) == {"offeredSkillId", "requestedSkillId"}


def test_requester_cannot_accept_or_reject(client_for, pending_request_id):
    carol = client_for("carol")
    for status in ("accepted", "rejected"):
        response = carol.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": status})
        assert response.status_code == 403


def test_outsider_cannot_touch_request(client_for, pending_request_id):
    bob = client_for("bob")
    assert bob.put(
        f"/api/swap-requests/{pending_request_id}/status", json={"status": "accepted"}
    ).status_code == 403
    assert bob.get(f"/api/swap-requests/{pending_request_id}").status_code == 403
    assert bob.delete(f"/api/swap-requests/{pending_request_id}").status_code == 403


def test_provider_accepts_then_either_party_completes(client_for, pending_request_id):
    alice = client_for("alice")
    carol = client_for("carol")

    accepted = alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "accepted"})
    assert accepted.status_code == 200
    assert accepted.get_json()["status"] == "accepted"

    # accepted -> rejected is not a defined move
    assert alice.put(
        f"/api/swap-requests/{pending_request_id}/status", json={"status": "rejected"}
    ).status_code == 409

    completed = carol.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "completed"})
    assert completed.status_code == 200
    assert completed.get_json()["status"] == "completed"

    for status in ("pending", "accepted", "rejected", "completed"):
        response = alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": status})
        assert response.status_code == 409


def test_rejected_is_terminal(client_for, pending_request_id):
    alice = client_for("alice")
    rejected = alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "rejected"})
    assert rejected.status_code == 200
    assert alice.put(
        f"/api/swap-requests/{pending_request_id}/status", json={"status": "accepted"}
    ).status_code == 409


def test_pending_cannot_jump_to_completed(client_for, pending_request_id):
    alice = client_for("alice")
    response = alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "completed"})
    assert response.status_code == 409


def test_unknown_status_is_a_validation_error(client_for, pending_request_id):
    alice = client_for("alice")
    response = alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "cancelled"})
    assert response.status_code == 400
    assert "status" in response.get_json()["errors"]


def test_requester_cancels_pending_request(client_for, pending_request_id):
    alice = client_for("alice")
    carol = client_for("carol")

    # only the requester may cancel
    assert alice.delete(f"/api/swap-requests/{pending_request_id}").status_code == 403

    response = carol.delete(f"/api/swap-requests/{pending_request_id}")
    assert response.status_code == 200
    assert carol.get(f"/api/swap-requests/{pending_request_id}").status_code == 404


def test_cannot_cancel_after_acceptance(client_for, pending_request_id):
    alice = client_for("alice")
    carol = client_for("carol")
    alice.put(f"/api/swap-requests/{pending_request_id}/status", json={"status": "accepted"})
    assert carol.delete(f"/api/swap-requests/{pending_request_id}").status_code == 409


def test_details_visible_to_parties_and_admin(client_for, pending_request_id):
    for username in ("alice", "carol", "admin"):
        response = client_for(username).get(f"/api/swap-requests/{pending_request_id}")
        assert response.status_code == 200
        body = response.get_json()
        assert body["requester"]["username"] == "carol"
        assert body["provider"]["username"] == "alice"
        assert body["requestedSkill"]["name"] == "Guitar"
    assert client_for("alice").get("/api/swap-requests/9999").status_code == 404


def test_user_listing_and_stats(client_for):
    carol = client_for("carol")
    listing = carol.get("/api/swap-requests/user").get_json()
    assert len(listing) == 2
    assert carol.get("/api/swap-requests/stats").get_json() == {
        "pending": 1,
        "accepted": 0,
        "rejected": 0,
        "completed": 1,
    }
