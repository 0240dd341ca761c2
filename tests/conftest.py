from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from participant_system.attendance.model import AttendanceRecord
from participant_system.blacklist.model import BlacklistRecord
from participant_system.container import wire_services
from participant_system.core.enums import EnrollmentStatus
from participant_system.enrollments.model import Enrollment
from participant_system.mail.sender import EmailDeliveryError
from participant_system.notifications.bus import NotificationBus
from participant_system.profiles.model import Profile


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[str, int, date], AttendanceRecord] = {}
        self._id = 0

    def upsert(self, *, participant_id, program_id, attendance_date, status, note=None):
        key = (participant_id, program_id, attendance_date)
        existing = self._by_key.get(key)
        if existing:
            record_id = existing.attendance_id
        else:
            self._id += 1
            record_id = self._id
        rec = AttendanceRecord(
            attendance_id=record_id,
            participant_id=participant_id,
            program_id=program_id,
            attendance_date=attendance_date,
            status=status,
            note=note,
        )
        self._by_key[key] = rec
        return rec

    def list_for_program(self, program_id, attendance_date=None):
        return [
            r
            for r in self._by_key.values()
            if r.program_id == program_id and (attendance_date is None or r.attendance_date == attendance_date)
        ]

    def list_for_participant(self, participant_id, program_id=None):
        return [
            r
            for r in self._by_key.values()
            if r.participant_id == participant_id and (program_id is None or r.program_id == program_id)
        ]

    def count_by_status(self, *, participant_id, program_id, status):
        return sum(
            1
            for r in self._by_key.values()
            if r.participant_id == participant_id and r.program_id == program_id and r.status == status
        )

    def all(self):
        return list(self._by_key.values())


class InMemoryBlacklist:
    def __init__(self):
        self._rows: dict[int, BlacklistRecord] = {}
        self._id = 0

    def create(self, *, participant_id, program_id, reason, banned_at, banned_until, banned_by):
        self._id += 1
        rec = BlacklistRecord(
            blacklist_id=self._id,
            participant_id=participant_id,
            program_id=program_id,
            reason=reason,
            banned_at=banned_at,
            banned_until=banned_until,
            banned_by=banned_by,
            active=True,
        )
        self._rows[self._id] = rec
        return rec

    def insert(self, rec: BlacklistRecord) -> BlacklistRecord:
        self._rows[rec.blacklist_id] = rec
        self._id = max(self._id, rec.blacklist_id)
        return rec

    def get_by_id(self, blacklist_id):
        return self._rows.get(int(blacklist_id))

    def deactivate(self, *, blacklist_id, lifted_by, lifted_at):
        rec = self._rows.get(int(blacklist_id))
        if not rec or not rec.active:
            return False
        self._rows[rec.blacklist_id] = BlacklistRecord(
            blacklist_id=rec.blacklist_id,
            participant_id=rec.participant_id,
            program_id=rec.program_id,
            reason=rec.reason,
            banned_at=rec.banned_at,
            banned_until=rec.banned_until,
            banned_by=rec.banned_by,
            active=False,
            lifted_at=lifted_at,
            lifted_by=lifted_by,
        )
        return True

    def list_active_until_after(self, *, participant_id, as_of):
        rows = [r for r in self._rows.values() if r.participant_id == participant_id and r.active and r.banned_until > as_of]
        return sorted(rows, key=lambda r: r.banned_until, reverse=True)

    def list_for_participant(self, participant_id):
        return [r for r in self._rows.values() if r.participant_id == participant_id]

    def list_all(self, *, limit=500):
        return sorted(self._rows.values(), key=lambda r: r.blacklist_id, reverse=True)[:limit]


class InMemoryEnrollments:
    def __init__(self):
        self._rows: dict[int, Enrollment] = {}
        self._id = 0

    def create(self, *, participant_id, program_id):
        self._id += 1
        rec = Enrollment(
            enrollment_id=self._id,
            participant_id=participant_id,
            program_id=program_id,
            status=EnrollmentStatus.PENDING,
        )
        self._rows[self._id] = rec
        return rec

    def get_by_id(self, enrollment_id):
        return self._rows.get(int(enrollment_id))

    def get_for_participant_and_program(self, participant_id, program_id):
        for r in self._rows.values():
            if r.participant_id == participant_id and r.program_id == program_id:
                return r
        return None

    def update_status(self, *, enrollment_id, status):
        rec = self._rows.get(int(enrollment_id))
        if not rec:
            return False
        self._rows[rec.enrollment_id] = Enrollment(
            enrollment_id=rec.enrollment_id,
            participant_id=rec.participant_id,
            program_id=rec.program_id,
            status=status,
        )
        return True

    def delete(self, enrollment_id):
        return self._rows.pop(int(enrollment_id), None) is not None

    def list_for_program(self, program_id, status=None):
        return [r for r in self._rows.values() if r.program_id == program_id and (status is None or r.status == status)]

    def list_for_participant(self, participant_id):
        return [r for r in self._rows.values() if r.participant_id == participant_id]


class InMemoryProfiles:
    def __init__(self, profiles: Optional[dict[str, Profile]] = None):
        self._profiles = profiles or {}

    def get_by_id(self, participant_id):
        return self._profiles.get(participant_id)

    def names_for(self, participant_ids):
        return {i: (self._profiles[i].name or "") for i in participant_ids if i in self._profiles}


class RecordingSender:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, message):
        if self.fail:
            raise EmailDeliveryError("Mail API failed with status 500: boom")
        self.sent.append(message)


@pytest.fixture
def bus():
    return NotificationBus()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def blacklist_repo():
    return InMemoryBlacklist()


@pytest.fixture
def profiles_repo():
    return InMemoryProfiles(
        {
            "user-x": Profile(participant_id="user-x", name="Kim Minji", email="minji@example.org"),
            "user-y": Profile(participant_id="user-y", name=None, email=None),
        }
    )


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def container(bus, attendance_repo, blacklist_repo, profiles_repo, sender):
    return wire_services(
        attendance_repo=attendance_repo,
        blacklist_repo=blacklist_repo,
        enrollments_repo=InMemoryEnrollments(),
        profiles_repo=profiles_repo,
        email_sender=sender,
        bus=bus,
    )


@pytest.fixture
def recorded(bus):
    events = []
    bus.subscribe(events.append)
    return events
