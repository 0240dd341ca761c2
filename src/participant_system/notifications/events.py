from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import AttendanceStatus, EnrollmentStatus, EventOrigin


@dataclass(frozen=True)
class AttendanceChanged:
    participant_id: str
    program_id: int
    date: date
    status: AttendanceStatus
    origin: EventOrigin = EventOrigin.LOCAL


@dataclass(frozen=True)
class BanApplied:
    blacklist_id: int
    participant_id: str
    program_id: Optional[int]
    reason: str
    banned_until: datetime
    origin: EventOrigin = EventOrigin.LOCAL


@dataclass(frozen=True)
class BanLifted:
    blacklist_id: int
    participant_id: str
    program_id: Optional[int]
    lifted_by: Optional[str] = None
    origin: EventOrigin = EventOrigin.LOCAL


@dataclass(frozen=True)
class ApplicationStatusChanged:
    enrollment_id: int
    participant_id: str
    program_id: int
    old_status: Optional[EnrollmentStatus]
    new_status: EnrollmentStatus
    origin: EventOrigin = EventOrigin.LOCAL


Event = Union[AttendanceChanged, BanApplied, BanLifted, ApplicationStatusChanged]
