from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.validators import require_date
from ..core.enums import AttendanceStatus, EnrollmentStatus, EventOrigin
from ..core.exceptions import ValidationError
from .bus import NotificationBus
from .events import ApplicationStatusChanged, AttendanceChanged, BanApplied, BanLifted, Event

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


class MalformedChangeError(ValueError):
    """A remote change payload is missing fields or carries bad values."""


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    raise MalformedChangeError(f"missing field {keys[0]!r}")


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise MalformedChangeError(f"bad timestamp {value!r}")


def _optional_int(row: Mapping[str, Any], key: str) -> Optional[int]:
    value = row.get(key)
    return int(value) if value is not None else None


class ChangeFeedAdapter:
    """Turns remote row changes into bus events.

    Accepts payloads shaped ``{"table", "type", "record", "old_record"}``
    (``eventType``/``new``/``old`` are accepted too) and publishes the same
    event classes the local services publish, tagged ``origin=REMOTE``.
    Tables and change types without a local counterpart are ignored.
    """

    def __init__(self, bus: NotificationBus):
        self._bus = bus

    def handle(self, payload: Any) -> Optional[Event]:
        if not isinstance(payload, Mapping):
            logger.warning("Dropping change payload of type %s", type(payload).__name__)
            return None
        try:
            event = self.translate(payload)
        except (MalformedChangeError, ValidationError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropping malformed change payload for table %r: %s", payload.get("table"), exc)
            return None
        if event is not None:
            self._bus.publish(event)
        return event

    def consume(self, payloads: Iterable[Any]) -> int:
        """Drain a stream of payloads; returns how many events were published."""
        return sum(1 for payload in payloads if self.handle(payload) is not None)

    def translate(self, payload: Mapping[str, Any]) -> Optional[Event]:
        table = payload.get("table")
        change = str(payload.get("type") or payload.get("eventType") or "").upper()
        new = payload.get("record") or payload.get("new") or {}
        old = payload.get("old_record") or payload.get("old") or {}
        if not isinstance(new, Mapping) or not isinstance(old, Mapping):
            raise MalformedChangeError("record and old_record must be objects")

        if table == "attendance":
            return self._attendance(change, new, old)
        if table == "blacklist":
            return self._blacklist(change, new, old)
        if table == "applications":
            return self._application(change, new, old)
        return None

    def _attendance(self, change: str, new: Mapping[str, Any], old: Mapping[str, Any]) -> Optional[Event]:
        if change not in {INSERT, UPDATE}:
            return None
        status = AttendanceStatus(_pick(new, "status"))
        if change == UPDATE and old.get("status") == status.value:
            return None
        return AttendanceChanged(
            participant_id=str(_pick(new, "participant_id", "user_id")),
            program_id=int(_pick(new, "program_id")),
            date=require_date(_pick(new, "attendance_date")),
            status=status,
            origin=EventOrigin.REMOTE,
        )

    def _blacklist(self, change: str, new: Mapping[str, Any], old: Mapping[str, Any]) -> Optional[Event]:
        active = bool(_pick(new, "is_active", "active")) if new else False
        if change == INSERT and active:
            return BanApplied(
                blacklist_id=int(_pick(new, "blacklist_id", "id")),
                participant_id=str(_pick(new, "participant_id", "user_id")),
                program_id=_optional_int(new, "program_id"),
                reason=str(new.get("reason") or ""),
                banned_until=_as_datetime(_pick(new, "banned_until", "blacklisted_until")),
                origin=EventOrigin.REMOTE,
            )
        if change == UPDATE and not active and bool(old.get("is_active", old.get("active"))):
            return BanLifted(
                blacklist_id=int(_pick(new, "blacklist_id", "id")),
                participant_id=str(_pick(new, "participant_id", "user_id")),
                program_id=_optional_int(new, "program_id"),
                lifted_by=new.get("lifted_by"),
                origin=EventOrigin.REMOTE,
            )
        return None

    def _application(self, change: str, new: Mapping[str, Any], old: Mapping[str, Any]) -> Optional[Event]:
        if change != UPDATE:
            return None
        new_status = EnrollmentStatus(_pick(new, "status"))
        old_raw = old.get("status")
        if old_raw == new_status.value:
            return None
        return ApplicationStatusChanged(
            enrollment_id=int(_pick(new, "application_id", "id")),
            participant_id=str(_pick(new, "participant_id", "user_id")),
            program_id=int(_pick(new, "program_id")),
            old_status=EnrollmentStatus(old_raw) if old_raw else None,
            new_status=new_status,
            origin=EventOrigin.REMOTE,
        )
