from __future__ import annotations

from datetime import date, datetime

from participant_system.core.enums import AttendanceStatus, EnrollmentStatus, EventOrigin
from participant_system.notifications.bus import NotificationBus
from participant_system.notifications.change_feed import ChangeFeedAdapter
from participant_system.notifications.events import ApplicationStatusChanged, AttendanceChanged, BanApplied, BanLifted


def _adapter():
    bus = NotificationBus()
    events = []
    bus.subscribe(events.append)
    return ChangeFeedAdapter(bus), events


def test_remote_attendance_insert_is_published_as_local_shape():
    feed, events = _adapter()

    feed.handle(
        {
            "table": "attendance",
            "type": "INSERT",
            "record": {
                "participant_id": "user-x",
                "program_id": 10,
                "attendance_date": "2026-03-02",
                "status": "absent",
            },
        }
    )

    assert events == [
        AttendanceChanged(
            participant_id="user-x",
            program_id=10,
            date=date(2026, 3, 2),
            status=AttendanceStatus.ABSENT,
            origin=EventOrigin.REMOTE,
        )
    ]


def test_realtime_style_keys_are_accepted():
    feed, events = _adapter()

    feed.handle(
        {
            "table": "applications",
            "eventType": "UPDATE",
            "new": {"id": 7, "user_id": "user-x", "program_id": 10, "status": "approved"},
            "old": {"id": 7, "status": "pending"},
        }
    )

    assert len(events) == 1
    event = events[0]
    assert isinstance(event, ApplicationStatusChanged)
    assert event.enrollment_id == 7
    assert event.old_status == EnrollmentStatus.PENDING
    assert event.new_status == EnrollmentStatus.APPROVED


def test_blacklist_insert_and_lift():
    feed, events = _adapter()
    row = {
        "blacklist_id": 4,
        "participant_id": "user-x",
        "program_id": None,
        "reason": "3 absences",
        "banned_until": "2026-09-10T09:00:00",
        "is_active": 1,
    }

    feed.handle({"table": "blacklist", "type": "INSERT", "record": row})
    feed.handle(
        {
            "table": "blacklist",
            "type": "UPDATE",
            "record": {**row, "is_active": 0, "lifted_by": "admin-1"},
            "old_record": row,
        }
    )

    applied, lifted = events
    assert isinstance(applied, BanApplied)
    assert applied.banned_until == datetime(2026, 9, 10, 9, 0, 0)
    assert isinstance(lifted, BanLifted)
    assert lifted.lifted_by == "admin-1"
    assert lifted.origin == EventOrigin.REMOTE


def test_noop_and_unknown_changes_are_ignored():
    feed, events = _adapter()

    published = feed.consume(
        [
            {"table": "posts", "type": "INSERT", "record": {"id": 1}},
            {"table": "attendance", "type": "DELETE", "old_record": {"id": 1}},
            {
                "table": "applications",
                "type": "UPDATE",
                "record": {"application_id": 2, "participant_id": "u", "program_id": 1, "status": "pending"},
                "old_record": {"status": "pending"},
            },
        ]
    )

    assert published == 0
    assert events == []


def test_malformed_payload_is_dropped(caplog):
    feed, events = _adapter()

    result = feed.handle({"table": "attendance", "type": "INSERT", "record": {"status": "absent"}})
    feed.handle({"table": "attendance", "type": "INSERT", "record": {"status": "sleeping"}})

    assert result is None
    assert events == []
    assert "Dropping malformed change payload" in caplog.text


def test_non_object_payloads_do_not_stop_the_stream(caplog):
    feed, events = _adapter()

    published = feed.consume(
        [
            "x",
            None,
            {"table": "attendance", "type": "UPDATE", "record": ["user-x"], "old_record": "absent"},
            {
                "table": "attendance",
                "type": "INSERT",
                "record": {"participant_id": "user-x", "program_id": 10, "attendance_date": "2026-03-02", "status": "late"},
            },
        ]
    )

    assert published == 1
    assert [e.status for e in events] == [AttendanceStatus.LATE]
    assert "Dropping change payload of type str" in caplog.text
