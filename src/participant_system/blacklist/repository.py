from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import BlacklistRecord


class BlacklistRepository(Protocol):
    def create(
        self,
        *,
        participant_id: str,
        program_id: Optional[int],
        reason: str,
        banned_at: datetime,
        banned_until: datetime,
        banned_by: Optional[str],
    ) -> BlacklistRecord:
        raise NotImplementedError

    def get_by_id(self, blacklist_id: int) -> Optional[BlacklistRecord]:
        raise NotImplementedError

    def deactivate(self, *, blacklist_id: int, lifted_by: Optional[str], lifted_at: datetime) -> bool:
        """Set active=false on a record that is still active. False when nothing changed."""

        raise NotImplementedError

    def list_active_until_after(self, *, participant_id: str, as_of: datetime) -> Sequence[BlacklistRecord]:
        """Records with active=true and banned_until > as_of, latest expiry first."""

        raise NotImplementedError

    def list_for_participant(self, participant_id: str) -> Sequence[BlacklistRecord]:
        raise NotImplementedError

    def list_all(self, *, limit: int = 500) -> Sequence[BlacklistRecord]:
        raise NotImplementedError
