from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from dateutil.relativedelta import relativedelta

from ..attendance.absence import AbsenceCounter
from ..common.datetime_utils import format_day, now_local
from ..common.validators import require_non_empty, require_participant_id, require_positive_id
from ..core.constants import DEFAULT_BAN_DURATION_MONTHS, DEFAULT_LIST_LIMIT
from ..core.enums import BanState
from ..core.exceptions import ActiveBanExistsError, AlreadyLiftedError, NotFoundError, ValidationError
from ..mail.blacklist_mailer import BlacklistMailer
from ..notifications.bus import NotificationBus
from ..notifications.events import BanApplied, BanLifted
from .model import BanOutcome, BlacklistRecord
from .repository import BlacklistRepository

logger = logging.getLogger(__name__)


class BlacklistPolicyEngine:
    """Creates, queries and lifts participation bans.

    Ban state is derived from ``active`` and ``banned_until`` together:

    - ENFORCED: active and banned_until in the future
    - EXPIRED: active but banned_until has passed (no event marks this)
    - LIFTED: active is false; terminal, a new ban needs a new record

    Bans apply to the participant across all programs; ``program_id`` only
    records which program prompted the ban. A participant may hold one
    enforced ban at a time; expired and lifted records do not block a new
    one.
    """

    def __init__(
        self,
        blacklist: BlacklistRepository,
        absences: AbsenceCounter,
        bus: NotificationBus,
        *,
        mailer: Optional[BlacklistMailer] = None,
        default_duration_months: int = DEFAULT_BAN_DURATION_MONTHS,
    ):
        self._blacklist = blacklist
        self._absences = absences
        self._bus = bus
        self._mailer = mailer
        self._default_duration_months = int(default_duration_months)

    def suggest_blacklist(self, participant_id: Any, program_id: Any, threshold: int | None = None) -> bool:
        """Advisory only: whether to offer a ban action for this participant."""
        return self._absences.threshold_reached(participant_id, program_id, threshold)

    def apply_ban(
        self,
        participant_id: Any,
        program_id: Any = None,
        *,
        reason: str,
        actor_id: Any,
        duration_months: int | None = None,
        now: datetime | None = None,
    ) -> BanOutcome:
        # Stored DATETIME columns keep whole seconds.
        now = (now or now_local()).replace(microsecond=0)
        participant_id = require_participant_id(participant_id)
        if program_id is not None:
            program_id = require_positive_id(program_id, "Program id")
        reason = require_non_empty(reason, "Reason")
        actor_id = require_non_empty(actor_id, "Actor id")
        months = self._default_duration_months if duration_months is None else duration_months
        if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
            raise ValidationError("Ban duration must be a positive number of months")

        current = self.current_ban(participant_id, as_of=now)
        if current:
            raise ActiveBanExistsError(
                f"Participant is already banned until {format_day(current.banned_until)}",
                banned_until=current.banned_until,
            )

        record = self._blacklist.create(
            participant_id=participant_id,
            program_id=program_id,
            reason=reason,
            banned_at=now,
            banned_until=now + relativedelta(months=months),
            banned_by=actor_id,
        )
        logger.info(
            "Ban %s applied to participant=%s until %s by %s",
            record.blacklist_id,
            participant_id,
            record.banned_until.isoformat(),
            actor_id,
        )

        self._bus.publish(
            BanApplied(
                blacklist_id=record.blacklist_id,
                participant_id=record.participant_id,
                program_id=record.program_id,
                reason=record.reason,
                banned_until=record.banned_until,
            )
        )
        warning = self._mailer.send_ban_notice(record) if self._mailer else None
        return BanOutcome(record=record, email_warning=warning)

    def lift_ban(self, blacklist_id: Any, actor_id: Any, *, now: datetime | None = None) -> BanOutcome:
        now = (now or now_local()).replace(microsecond=0)
        blacklist_id = require_positive_id(blacklist_id, "Blacklist id")
        actor_id = require_non_empty(actor_id, "Actor id")

        record = self._blacklist.get_by_id(blacklist_id)
        if not record:
            raise NotFoundError(f"Blacklist record {blacklist_id} does not exist")
        if not record.active:
            raise AlreadyLiftedError(f"Blacklist record {blacklist_id} is already lifted")

        if not self._blacklist.deactivate(blacklist_id=blacklist_id, lifted_by=actor_id, lifted_at=now):
            # Lost a race with another lift.
            raise AlreadyLiftedError(f"Blacklist record {blacklist_id} is already lifted")

        lifted = self._blacklist.get_by_id(blacklist_id)
        if lifted is None:
            raise NotFoundError(f"Blacklist record {blacklist_id} does not exist")
        logger.info("Ban %s lifted for participant=%s by %s", blacklist_id, lifted.participant_id, actor_id)

        self._bus.publish(
            BanLifted(
                blacklist_id=lifted.blacklist_id,
                participant_id=lifted.participant_id,
                program_id=lifted.program_id,
                lifted_by=actor_id,
            )
        )
        warning = self._mailer.send_lift_notice(lifted) if self._mailer else None
        return BanOutcome(record=lifted, email_warning=warning)

    def is_banned(self, participant_id: Any, as_of: datetime | None = None) -> bool:
        return self.current_ban(participant_id, as_of=as_of) is not None

    def current_ban(self, participant_id: Any, as_of: datetime | None = None) -> Optional[BlacklistRecord]:
        """The enforced record with the latest expiry, or None."""
        as_of = as_of or now_local()
        participant_id = require_participant_id(participant_id)
        rows = [
            r
            for r in self._blacklist.list_active_until_after(participant_id=participant_id, as_of=as_of)
            if r.is_enforced(as_of)
        ]
        if not rows:
            return None
        return max(rows, key=lambda r: r.banned_until)

    def history(self, participant_id: Any) -> Sequence[BlacklistRecord]:
        return list(self._blacklist.list_for_participant(require_participant_id(participant_id)))

    def list_records(
        self,
        state: BanState | str | None = None,
        *,
        as_of: datetime | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[BlacklistRecord]:
        as_of = as_of or now_local()
        rows = list(self._blacklist.list_all(limit=limit))
        if state is None:
            return rows
        try:
            wanted = BanState(state)
        except ValueError:
            raise ValidationError(f"Unknown ban state: {state}")
        return [r for r in rows if r.state(as_of) == wanted]
