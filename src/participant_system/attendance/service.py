from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from typing import Any, Optional, Sequence

from ..common.validators import (
    optional_text,
    require_attendance_status,
    require_date,
    require_participant_id,
    require_positive_id,
)
from ..core.enums import AttendanceStatus
from ..notifications.bus import NotificationBus
from ..notifications.events import AttendanceChanged
from .model import AttendanceRecord, AttendanceStats, DayStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Owns attendance records: one status per (participant, program, date).

    Whether ``date`` is one of the program's scheduled session days is the
    caller's concern.
    """

    def __init__(self, attendance: AttendanceRepository, bus: NotificationBus):
        self._attendance = attendance
        self._bus = bus

    def mark_attendance(
        self,
        participant_id: Any,
        program_id: Any,
        attendance_date: Any,
        status: Any,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        participant_id = require_participant_id(participant_id)
        program_id = require_positive_id(program_id, "Program id")
        day = require_date(attendance_date, "Attendance date")
        status = require_attendance_status(status)
        note = optional_text(note, "Note")

        record = self._attendance.upsert(
            participant_id=participant_id,
            program_id=program_id,
            attendance_date=day,
            status=status,
            note=note,
        )
        logger.info("Attendance %s for participant=%s program=%s date=%s", status.value, participant_id, program_id, day)

        self._bus.publish(
            AttendanceChanged(
                participant_id=record.participant_id,
                program_id=record.program_id,
                date=record.attendance_date,
                status=record.status,
            )
        )
        return record

    def query(self, program_id: Any, attendance_date: Any = None) -> Sequence[AttendanceRecord]:
        program_id = require_positive_id(program_id, "Program id")
        day = require_date(attendance_date, "Attendance date") if attendance_date is not None else None
        return list(self._attendance.list_for_program(program_id, day))

    def for_participant(self, participant_id: Any, program_id: Any = None) -> Sequence[AttendanceRecord]:
        participant_id = require_participant_id(participant_id)
        if program_id is not None:
            program_id = require_positive_id(program_id, "Program id")
        rows = list(self._attendance.list_for_participant(participant_id, program_id))
        rows.sort(key=lambda r: r.attendance_date)
        return rows

    def stats(self, program_id: Any) -> AttendanceStats:
        records = self.query(program_id)

        by_date: dict[date, DayStats] = OrderedDict()
        for r in sorted(records, key=lambda r: r.attendance_date):
            day = by_date.setdefault(r.attendance_date, DayStats())
            setattr(day, r.status.value, getattr(day, r.status.value) + 1)

        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT)
        late = sum(1 for r in records if r.status == AttendanceStatus.LATE)
        total = len(records)

        return AttendanceStats(
            program_id=int(program_id),
            total_present=present,
            total_absent=absent,
            total_late=late,
            total_records=total,
            attendance_rate=round(present * 100 / total) if total else 0,
            by_date=dict(by_date),
        )
