from __future__ import annotations

import pytest

from participant_system.main import create_app


@pytest.fixture
def app(container):
    app = create_app(container, settings_module="participant_system.config.testing")
    return app


@pytest.fixture
def admin(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "admin-1"
        sess["role"] = "admin"
    return client


@pytest.fixture
def participant(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "user-x"
        sess["role"] = "participant"
    return client


def test_routes_require_login_and_admin(app, participant):
    assert app.test_client().get("/api/me/can-enroll").status_code == 401

    res = participant.get("/api/programs/10/attendance")
    assert res.status_code == 403


def test_mark_attendance_and_suggest(admin):
    for day in ("2026-03-02", "2026-03-09", "2026-03-16"):
        res = admin.put(
            "/api/programs/10/attendance",
            json={"participant_id": "user-x", "date": day, "status": "absent"},
        )
        assert res.status_code == 200

    res = admin.get("/api/programs/10/participants/user-x/absences")
    assert res.get_json() == {"success": True, "absences": 3, "suggest_blacklist": True}

    records = admin.get("/api/programs/10/attendance?date=2026-03-09").get_json()["records"]
    assert len(records) == 1
    assert records[0]["status"] == "absent"
    assert records[0]["attendance_date"] == "2026-03-09"

    csv_res = admin.get("/api/programs/10/attendance.csv")
    assert csv_res.mimetype == "text/csv"
    assert "Kim Minji" in csv_res.get_data(as_text=True)


def test_bad_attendance_payload_is_400(admin):
    res = admin.put("/api/programs/10/attendance", json={"participant_id": "user-x", "date": "soon", "status": "absent"})
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_ban_blocks_application_until_lifted(admin, participant):
    res = admin.post("/api/blacklist", json={"participant_id": "user-x", "program_id": 10, "reason": "3 absences"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["warning"] is None
    ban_id = body["record"]["blacklist_id"]

    assert admin.post("/api/blacklist", json={"participant_id": "user-x", "reason": "again"}).status_code == 409

    assert participant.get("/api/me/can-enroll").get_json()["can_enroll"] is False
    blocked = participant.post("/api/programs/10/applications")
    assert blocked.status_code == 409
    assert "banned_until" in blocked.get_json()

    assert admin.post(f"/api/blacklist/{ban_id}/lift").status_code == 200
    assert admin.post(f"/api/blacklist/{ban_id}/lift").status_code == 409
    assert admin.post("/api/blacklist/999/lift").status_code == 404

    assert participant.get("/api/me/can-enroll").get_json()["can_enroll"] is True
    assert participant.post("/api/programs/10/applications").status_code == 201

    lifted = admin.get("/api/blacklist?state=lifted").get_json()["records"]
    assert [r["blacklist_id"] for r in lifted] == [ban_id]

    kinds = [n["kind"] for n in participant.get("/api/me/notifications").get_json()["notifications"]]
    assert kinds == ["blacklist", "blacklist"]


def test_application_status_flow(admin, participant):
    app_id = participant.post("/api/programs/10/applications").get_json()["application"]["enrollment_id"]

    res = admin.put(f"/api/applications/{app_id}/status", json={"status": "approved"})
    assert res.get_json()["application"]["status"] == "approved"

    mine = participant.get("/api/me/applications").get_json()["applications"]
    assert mine[0]["status"] == "approved"
    assert participant.get("/api/me/notifications").get_json()["unread"] == 1

    assert admin.delete(f"/api/applications/{app_id}").status_code == 200


def test_remote_changes_are_published(admin, participant):
    res = admin.post(
        "/api/changes",
        json=[
            {
                "table": "attendance",
                "type": "INSERT",
                "record": {"participant_id": "user-x", "program_id": 10, "attendance_date": "2026-03-02", "status": "late"},
            },
            {"table": "posts", "type": "INSERT", "record": {"id": 3}},
        ],
    )

    assert res.get_json() == {"success": True, "published": 1}
    notes = participant.get("/api/me/notifications").get_json()["notifications"]
    assert "late" in notes[0]["message"]


def test_remote_changes_skip_non_object_items(admin, participant):
    res = admin.post(
        "/api/changes",
        json=[
            "x",
            None,
            {
                "table": "attendance",
                "type": "INSERT",
                "record": {"participant_id": "user-x", "program_id": 10, "attendance_date": "2026-03-02", "status": "absent"},
            },
        ],
    )

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "published": 1}
    notes = participant.get("/api/me/notifications").get_json()["notifications"]
    assert "absent" in notes[0]["message"]


def test_non_text_note_is_rejected(admin):
    res = admin.put(
        "/api/programs/10/attendance",
        json={"participant_id": "user-x", "date": "2026-03-02", "status": "absent", "note": 5},
    )
    assert res.status_code == 400
