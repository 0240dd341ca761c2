from __future__ import annotations

import threading
from collections import OrderedDict, deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, List

from ..common.datetime_utils import format_day, now_local
from ..core.enums import AttendanceStatus, EnrollmentStatus
from .bus import NotificationBus
from .events import ApplicationStatusChanged, AttendanceChanged, BanApplied, BanLifted, Event

_ATTENDANCE_LABELS = {
    AttendanceStatus.PRESENT: "marked present",
    AttendanceStatus.ABSENT: "marked absent",
    AttendanceStatus.LATE: "marked late",
}

_APPLICATION_LABELS = {
    EnrollmentStatus.APPROVED: "Your application was approved",
    EnrollmentStatus.CANCELLED: "Your application was declined",
    EnrollmentStatus.PENDING: "Your application is pending again",
}


@dataclass(frozen=True)
class Notification:
    kind: str
    message: str
    created_at: datetime


def describe(event: Event) -> Notification:
    now = now_local()
    if isinstance(event, AttendanceChanged):
        return Notification(
            "attendance",
            f"You were {_ATTENDANCE_LABELS[event.status]} on {format_day(event.date)} (program {event.program_id})",
            now,
        )
    if isinstance(event, BanApplied):
        return Notification("blacklist", f"Applications restricted until {format_day(event.banned_until)}", now)
    if isinstance(event, BanLifted):
        return Notification("blacklist", "Your application restriction was lifted", now)
    if isinstance(event, ApplicationStatusChanged):
        return Notification("application", f"{_APPLICATION_LABELS[event.new_status]} (program {event.program_id})", now)
    raise TypeError(f"Unsupported event {type(event).__name__}")


class NotificationInbox:
    """Keeps the latest notifications per participant for the header badge.

    Holds at most ``max_participants`` inboxes; the one notified least
    recently is evicted first.
    """

    def __init__(self, *, max_per_participant: int = 50, max_participants: int = 1000):
        self._lock = threading.Lock()
        self._max_per_participant = max_per_participant
        self._max_participants = max_participants
        self._items: OrderedDict[str, Deque[Notification]] = OrderedDict()
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self, bus: NotificationBus) -> None:
        self._unsubscribe = bus.subscribe(self.receive)

    def detach(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def receive(self, event: Event) -> None:
        note = describe(event)
        with self._lock:
            items = self._items.get(event.participant_id)
            if items is None:
                items = self._items[event.participant_id] = deque(maxlen=self._max_per_participant)
                while len(self._items) > self._max_participants:
                    self._items.popitem(last=False)
            else:
                self._items.move_to_end(event.participant_id)
            items.appendleft(note)

    def for_participant(self, participant_id: str) -> List[Notification]:
        with self._lock:
            return list(self._items.get(participant_id, ()))

    def clear(self, participant_id: str) -> None:
        with self._lock:
            self._items.pop(participant_id, None)
