from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        participant_id: str,
        program_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert or overwrite the single record for (participant, program, date)."""

        raise NotImplementedError

    def list_for_program(self, program_id: int, attendance_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_participant(self, participant_id: str, program_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(self, *, participant_id: str, program_id: int, status: AttendanceStatus) -> int:
        raise NotImplementedError
