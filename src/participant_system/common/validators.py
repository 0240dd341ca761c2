from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_participant_id(value: Any) -> str:
    return require_non_empty(value, "Participant id")


def require_positive_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_date(value: Any, field_name: str = "Date") -> date:
    if isinstance(value, date):
        return value if type(value) is date else value.date()
    if isinstance(value, str):
        try:
            return parse_iso_date(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


def require_attendance_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Attendance status must be one of: {allowed}")


def optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip() or None
