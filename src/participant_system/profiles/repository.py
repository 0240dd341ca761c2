from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, participant_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def names_for(self, participant_ids: Iterable[str]) -> Mapping[str, str]:
        raise NotImplementedError
