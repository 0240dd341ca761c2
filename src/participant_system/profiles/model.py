from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Profile:
    participant_id: str
    name: Optional[str]
    email: Optional[str]

    @property
    def display_name(self) -> str:
        return self.name or "Participant"
