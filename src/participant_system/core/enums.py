from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for route authorization."""

    ADMIN = "admin"
    PARTICIPANT = "participant"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class EnrollmentStatus(str, Enum):
    """Approval state of a program application."""

    PENDING = "pending"
    APPROVED = "approved"
    CANCELLED = "cancelled"


class BanState(str, Enum):
    """Derived state of a blacklist record; never persisted."""

    ENFORCED = "enforced"
    EXPIRED = "expired"
    LIFTED = "lifted"


class EventOrigin(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
