from __future__ import annotations

from datetime import datetime
from typing import Any

from ..blacklist.service import BlacklistPolicyEngine
from ..common.datetime_utils import format_day, now_local
from ..core.exceptions import BlacklistedError


class EnrollmentGate:
    """Checks ban status at the moment of an enrollment attempt.

    Nothing is cached: a ban can expire or be lifted between page load and
    submit.
    """

    def __init__(self, blacklist: BlacklistPolicyEngine):
        self._blacklist = blacklist

    def can_enroll(self, participant_id: Any, *, now: datetime | None = None) -> bool:
        return not self._blacklist.is_banned(participant_id, as_of=now or now_local())

    def ensure_can_enroll(self, participant_id: Any, *, now: datetime | None = None) -> None:
        ban = self._blacklist.current_ban(participant_id, as_of=now or now_local())
        if ban:
            raise BlacklistedError(
                f"Applications are restricted; available again on {format_day(ban.banned_until)}",
                banned_until=ban.banned_until,
            )
