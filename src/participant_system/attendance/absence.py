from __future__ import annotations

from typing import Any

from ..common.validators import require_participant_id, require_positive_id
from ..core.constants import DEFAULT_ABSENCE_THRESHOLD
from ..core.enums import AttendanceStatus
from .repository import AttendanceRepository


class AbsenceCounter:
    """Absence totals read straight from the ledger; nothing is cached."""

    def __init__(self, attendance: AttendanceRepository, *, default_threshold: int = DEFAULT_ABSENCE_THRESHOLD):
        self._attendance = attendance
        self._default_threshold = int(default_threshold)

    def count(self, participant_id: Any, program_id: Any) -> int:
        return self._attendance.count_by_status(
            participant_id=require_participant_id(participant_id),
            program_id=require_positive_id(program_id, "Program id"),
            status=AttendanceStatus.ABSENT,
        )

    def threshold_reached(self, participant_id: Any, program_id: Any, threshold: int | None = None) -> bool:
        threshold = self._default_threshold if threshold is None else int(threshold)
        return self.count(participant_id, program_id) >= threshold
