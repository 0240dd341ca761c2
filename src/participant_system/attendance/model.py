from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one participant's attendance for one program day."""

    attendance_id: int
    participant_id: str
    program_id: int
    attendance_date: date
    status: AttendanceStatus
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class DayStats:
    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for the program attendance overview."""

    program_id: int
    total_present: int
    total_absent: int
    total_late: int
    total_records: int
    attendance_rate: int
    by_date: Dict[date, DayStats] = field(default_factory=dict)
