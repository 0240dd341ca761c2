from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    participant_id: str
    program_id: int
    status: EnrollmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
