from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BanState


@dataclass(frozen=True)
class BlacklistRecord:
    """Domain entity: a time-bound participation ban.

    ``active`` is only ever cleared by an explicit lift; it stays true after
    ``banned_until`` has passed. Use ``state()``/``is_enforced()`` rather
    than reading ``active`` on its own.
    """

    blacklist_id: int
    participant_id: str
    program_id: Optional[int]
    reason: str
    banned_at: datetime
    banned_until: datetime
    banned_by: Optional[str]
    active: bool
    lifted_at: Optional[datetime] = None
    lifted_by: Optional[str] = None

    def is_enforced(self, as_of: datetime) -> bool:
        return self.active and self.banned_until > as_of

    def state(self, as_of: datetime) -> BanState:
        if not self.active:
            return BanState.LIFTED
        if self.banned_until > as_of:
            return BanState.ENFORCED
        return BanState.EXPIRED


@dataclass(frozen=True)
class BanOutcome:
    """Result of a ban or lift. ``email_warning`` is set when the notice email failed."""

    record: BlacklistRecord
    email_warning: Optional[str] = None
