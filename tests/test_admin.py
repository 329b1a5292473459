"""Admin moderation, broadcast messages and report tests."""

from __future__ import annotations

import pytest

from conftest import login


def test_admin_routes_require_admin_privileges(client, client_for, user_ids):
    alice = client_for("alice")
    assert alice.get("/api/admin/users").status_code == 403
    assert alice.post(f"/api/admin/ban/{user_ids['bob']}").status_code == 403
    assert alice.get("/api/reports").status_code == 403
    assert client.get("/api/admin/users").status_code == 401

    admin = client_for("admin")
    users = admin.get("/api/admin/users").get_json()
    assert {user["username"] for user in users} == {"admin", "alice", "bob", "carol", "dave", "erin"}
    assert all("passwordHash" not in user for user in users)


def test_ban_and_unban(client, client_for, user_ids):
    admin = client_for("admin")

    response = admin.post(f"/api/admin/ban/{user_ids['bob']}")
    assert response.status_code == 200
    assert response.get_json() == {"message": "User banned successfully"}
    assert login(client, "bob").status_code == 403

    response = admin.post(f"/api/admin/unban/{user_ids['bob']}")
    assert response.get_json() == {"message": "User unbanned successfully"}
    assert login(client, "bob").status_code == 200


def test_ban_edge_cases(client_for, user_ids):
    admin = client_for("admin")
    assert admin.post("/api/admin/ban/9999").status_code == 404
    assert admin.post(f"/api/admin/ban/{user_ids['admin']}").status_code == 400


def test_broadcast_messages(client, client_for):
    feed = client.get("/api/admin/messages").get_json()
    assert [message["title"] for message in feed] == ["Welcome to Skill Swap"]

    admin = client_for("admin")
    created = admin.post(
        "/api/admin/messages",
        json={"title": "Maintenance tonight", "content": "Back by 2am.", "type": "maintenance"},
    )
    assert created.status_code == 201
    message_id = created.get_json()["id"]
    assert created.get_json()["isActive"] is True

    titles = [message["title"] for message in client.get("/api/admin/messages").get_json()]
    assert "Maintenance tonight" in titles

    deactivated = admin.post(f"/api/admin/messages/{message_id}/deactivate")
    assert deactivated.status_code == 200
    assert deactivated.get_json()["isActive"] is False
    titles = [message["title"] for message in client.get("/api/admin/messages").get_json()]
    assert "Maintenance tonight" not in titles


def test_broadcast_message_validation(client_for):
    admin = client_for("admin")
    response = admin.post("/api/admin/messages", json={"title": "Hi", "content": "x", "type": "gossip"})
    assert response.status_code == 400
    assert "type" in response.get_json()["errors"]

    alice = client_for("alice")
    denied = alice.post("/api/admin/messages", json={"title": "Hi", "content": "x", "type": "announcement"})
    assert denied.status_code == 403


def test_skill_approval_gates_public_listing(client, client_for, skill_ids):
    admin = client_for("admin")
    python_id = skill_ids[("carol", "Python Programming")]

    def offered_names():
        return [skill["name"] for skill in client.get("/api/skills/type/offered").get_json()]

    assert "Python Programming" not in offered_names()
    approved = admin.post(f"/api/admin/skills/{python_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["isApproved"] is True
    assert "Python Programming" in offered_names()

    admin.post(f"/api/admin/skills/{python_id}/unapprove")
    assert "Python Programming" not in offered_names()
    assert admin.post("/api/admin/skills/9999/approve").status_code == 404


def test_admin_stats(client_for):
    stats = client_for("admin").get("/api/admin/stats").get_json()
    assert stats == {
        "totalUsers": 6,
        "bannedUsers": 1,
        "activeSkills": 8,
        "pendingRequests": 1,
        "completedSwaps": 1,
        "pendingReports": 1,
    }


def test_report_lifecycle(client_for, user_ids, skill_ids):
    bob = client_for("bob")
    filed = bob.post(
        "/api/reports",
        json={
            "reportedSkillId": skill_ids[("erin", "Woodworking")],
            "reason": "Inappropriate",
            "description": "Listing copies another site.",
        },
    )
    assert filed.status_code == 201
    report = filed.get_json()
    assert report["status"] == "pending"
    assert report["reporterId"] == user_ids["bob"]

    admin = client_for("admin")
    listing = admin.get("/api/reports").get_json()
    newest = listing[0]
    assert newest["report"]["id"] == report["id"]
    assert newest["reportedSkill"]["name"] == "Woodworking"
    assert newest["reporter"]["username"] == "bob"

    # status changes are admin only
    assert bob.put(f"/api/reports/{report['id']}/status", json={"status": "resolved"}).status_code == 403

    reviewed = admin.put(f"/api/reports/{report['id']}/status", json={"status": "reviewed"})
    assert reviewed.status_code == 200
    assert reviewed.get_json()["status"] == "reviewed"

    bad = admin.put(f"/api/reports/{report['id']}/status", json={"status": "ignored"})
    assert bad.status_code == 400
    assert admin.put("/api/reports/9999/status", json={"status": "resolved"}).status_code == 404

    resolved = admin.put(f"/api/reports/{report['id']}/status", json={"status": "resolved"})
    assert resolved.status_code == 200
    assert resolved.get_json()["status"] == "resolved"


@pytest.mark.parametrize("target", ["pending", "reviewed", "resolved"])
def test_resolved_report_is_final(client_for, target):
    admin = client_for("admin")
    report_id = admin.get("/api/reports").get_json()[0]["report"]["id"]
    assert admin.put(f"/api/reports/{report_id}/status", json={"status": "resolved"}).status_code == 200

    reopened = admin.put(f"/api/reports/{report_id}/status", json={"status": target})
    assert reopened.status_code == 409
    assert admin.get("/api/reports").get_json()[0]["report"]["status"] == "resolved"


def test_reviewed_report_cannot_go_back_to_pending(client_for):
    admin = client_for("admin")
    report_id = admin.get("/api/reports").get_json()[0]["report"]["id"]
    assert admin.put(f"/api/reports/{report_id}/status", json={"status": "reviewed"}).status_code == 200
    assert admin.put(f"/api/reports/{report_id}/status", json={"status": "pending"}).status_code == 409


def test_report_requires_existing_target(client_for):
    bob = client_for("bob")
    no_target = bob.post("/api/reports", json={"reason": "Spam"})
    assert no_target.status_code == 400
    assert "reportedUserId" in no_target.get_json()["errors"]

    missing = bob.post("/api/reports", json={"reason": "Spam", "reportedRequestId": 9999})
    assert missing.status_code == 400
    assert "reportedRequestId" in missing.get_json()["errors"]
